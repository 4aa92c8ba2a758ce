"""Tabular views, summaries, and CSV export of the workout store."""

from __future__ import annotations

import os
from datetime import datetime, timezone

import pandas as pd

from core.workout_store import workout_to_dict


EXPORT_COLUMNS = [
    'id',
    'createdAt',
    'kind',
    'description',
    'lat',
    'lng',
    'distanceKm',
    'durationMin',
    'paceMinPerKm',
    'cadenceSpm',
    'speedKmPerH',
    'elevationGainM',
]


class DataManager:
    """Owns the DataFrame view of the store used by the summary panel and export."""

    def __init__(self, store):
        self.store = store

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for workout in self.store.all():
            row = workout_to_dict(workout)
            lat, lng = row.pop('coordinates')
            row['lat'] = lat
            row['lng'] = lng
            # Naive timestamps are local wall-clock time.
            row['createdAt'] = workout.created_at.astimezone(timezone.utc)
            rows.append(row)
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        if not df.empty:
            df['createdAt'] = pd.to_datetime(df['createdAt'], utc=True)
        return df

    def summarize(self):
        """Per-kind totals: count, distance, duration, and average pace or speed."""
        df = self.to_dataframe()
        summary = {}
        for kind in ('running', 'cycling'):
            subset = df[df['kind'] == kind]
            entry = {
                'count': int(len(subset)),
                'distance_km': float(subset['distanceKm'].sum()) if len(subset) else 0.0,
                'duration_min': float(subset['durationMin'].sum()) if len(subset) else 0.0,
            }
            if kind == 'running':
                entry['avg_pace_min_per_km'] = (
                    float(subset['paceMinPerKm'].mean()) if len(subset) else None
                )
            else:
                entry['avg_speed_km_per_h'] = (
                    float(subset['speedKmPerH'].mean()) if len(subset) else None
                )
            summary[kind] = entry
        return summary

    def _generate_csv_content(self, df=None) -> str:
        export_df = self.to_dataframe() if df is None else df
        if export_df is None or export_df.empty:
            raise ValueError("No data to export")
        prepared_df = export_df.copy()
        prepared_df['createdAt'] = prepared_df['createdAt'].astype(str)
        return prepared_df[EXPORT_COLUMNS].to_csv(index=False)

    def export_csv(self, destination_dir=None) -> str:
        """Write CSV export to disk and return the saved file path."""
        content = self._generate_csv_content()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"workouts_{timestamp}.csv"
        output_dir = destination_dir or os.path.expanduser("~/Downloads")
        os.makedirs(output_dir, exist_ok=True)
        file_path = os.path.join(output_dir, filename)

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)

        return file_path
