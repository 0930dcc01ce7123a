"""
Event logger for SentiLight.

Logs two types of events:
1. Mood commands - user mood text, generated command and outcome
2. Presets - preset scenes sent to the bulbs

All events are logged with timestamps in JSON format.
"""

import json
from datetime import datetime, timezone
from pathlib import Path


class EventLogger:
    """Daily JSONL logging for mood commands and presets."""

    def __init__(self, log_dir='data/logs'):
        """
        Initialize event logger.

        Args:
            log_dir: Base directory for log files
        """
        self.log_dir = Path(log_dir)

        # Create log subdirectories
        self.mood_log_dir = self.log_dir / 'mood_commands'
        self.preset_log_dir = self.log_dir / 'presets'

        for log_dir in [self.mood_log_dir, self.preset_log_dir]:
            log_dir.mkdir(parents=True, exist_ok=True)

        print(f"EventLogger initialized: {self.log_dir}")

    def log_mood_command(self, text: str, result):
        """
        Log a mood command event.

        Args:
            text: The mood text the user gave
            result: MoodResult of the request
        """
        event = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'type': 'mood_command',
            'text': text,
            **result.to_dict(),
        }

        self._write_log(self.mood_log_dir, event)

    def log_preset(self, result):
        """
        Log a preset event.

        Args:
            result: MoodResult of the preset request
        """
        event = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'type': 'preset',
            **result.to_dict(),
        }

        self._write_log(self.preset_log_dir, event)

    def _write_log(self, log_dir: Path, event: dict):
        """
        Write a log event to a daily JSONL file.

        Args:
            log_dir: Directory to write log to
            event: Event dictionary to log
        """
        # Ensure log directory exists
        log_dir.mkdir(parents=True, exist_ok=True)

        # Create daily log file
        date_str = datetime.now(timezone.utc).strftime('%Y-%m-%d')
        log_file = log_dir / f'log-{date_str}.jsonl'

        # Append to file
        with open(log_file, 'a') as f:
            f.write(json.dumps(event) + '\n')

    def get_log_files(self, log_type='all'):
        """
        Get list of log files.

        Args:
            log_type: 'mood', 'preset', or 'all'

        Returns:
            List of log file paths, oldest first
        """
        log_files = []

        if log_type in ['mood', 'all']:
            log_files.extend(self.mood_log_dir.glob('log-*.jsonl'))
        if log_type in ['preset', 'all']:
            log_files.extend(self.preset_log_dir.glob('log-*.jsonl'))

        return sorted(log_files, key=lambda p: p.name)

    def read_events(self, log_type='all', limit=None):
        """
        Read logged events back, newest last.

        Args:
            log_type: 'mood', 'preset', or 'all'
            limit: Only return the most recent N events

        Returns:
            List of event dicts
        """
        events = []
        for log_file in self.get_log_files(log_type):
            with open(log_file, 'r') as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        events.append(json.loads(line))
                    except ValueError:
                        print(f"Skipping bad log line in {log_file}")

        events.sort(key=lambda e: e.get('timestamp', ''))
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events
