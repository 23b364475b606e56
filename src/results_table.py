"""ResultsTable: in-memory exporter for fluency trial payloads (tabular display)."""
from __future__ import annotations

from fluency_types import ParticipantInfo, ResultPayload

COLUMNS = [
    'participant_id', 'trial_index', 'category', 'prime_mode',
    'row_type', 'word', 'time', 'appeared_at', 'disappeared_at',
]


class ResultsTable:
    """Collects every trial's payload for end-of-session display.

    Nothing is written to disk; the table lives as long as the session.
    """

    def __init__(self, participant_info: ParticipantInfo | None = None) -> None:
        """Initialize results table.

        Args:
            participant_info: Participant metadata shown with every row
        """
        self.participant_info: ParticipantInfo = participant_info or {}
        self.trials: list[ResultPayload] = []

    def add(self, payload: ResultPayload) -> int:
        """Append a trial payload; returns its trial index."""
        self.trials.append(payload)
        return len(self.trials) - 1

    def rows(self) -> list[dict]:
        """Flatten to one row per submission, then one per prime shown, per trial."""
        pid = self.participant_info.get('participant_id', '')
        out: list[dict] = []
        for index, trial in enumerate(self.trials):
            base = {
                'participant_id': pid,
                'trial_index': index,
                'category': trial.get('category', ''),
                'prime_mode': trial.get('prime_mode', 'none'),
            }
            for sub in trial.get('words_list', []):
                out.append({
                    **base,
                    'row_type': 'response',
                    'word': sub['word'],
                    'time': sub['time'],
                    'appeared_at': '',
                    'disappeared_at': '',
                })
            for prime in trial.get('prime_words_shown', []):
                disappeared = prime.get('disappeared_at')
                out.append({
                    **base,
                    'row_type': 'prime',
                    'word': prime['word'],
                    'time': '',
                    'appeared_at': prime['appeared_at'],
                    'disappeared_at': disappeared if disappeared is not None else '',
                })
        return out

    def render_table(self) -> str:
        """Plain-text table of rows(), one line per row."""
        lines = ['\t'.join(COLUMNS)]
        for row in self.rows():
            lines.append('\t'.join(str(row[c]) for c in COLUMNS))
        return '\n'.join(lines)
