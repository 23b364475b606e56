"""Verbal Fluency Task – Entry Point

This module is the application entry for the verbal fluency task. It is responsible for:
- Collecting participant information via a PsychoPy dialog
- Configuring logging (file + console, PsychoPy's own console quietened)
- Loading configuration and delegating the experiment flow to `fluency_task.FluencyTask`

Current behavior:
- A welcome notice and a tutorial screen, each dismissed with ENTER.
- One trial per configured category (`configs/sequence.json`), 60 s by default. The
  participant types a word and presses ENTER to submit it; the box clears.
- Prime words appear in blue under the category heading, either at scheduled times
  (`prime_mode: "timed"`) or after a random 3–6 responses (`prime_mode: "counted"`).
  While a counted prime is visible (500 ms) the input box is locked.
- At the end every response and prime word is shown as a table.

Debug mode:
- Enable by setting `"debug_mode": true` in `configs/layout.json`, or by entering participant_id `0`.
- Trials are shortened to `debug_trial_duration_ms` and the window runs in 1280×800.

Dependencies: PsychoPy.
"""
import logging
import os
from datetime import datetime

from psychopy import gui
from psychopy import logging as psychopy_logging

from config_loader import BASE_DIR, load_layout, load_sequence
from fluency_task import FluencyTask


def setup_logging(log_path, file_level=logging.DEBUG, console_level=logging.INFO):
    """Configure root logging to a file and the console."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    fh = logging.FileHandler(log_path, encoding='utf-8')
    fh.setLevel(file_level)
    fh.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
    logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(ch)

    psychopy_logging.console.setLevel(psychopy_logging.WARNING)
    logging.debug("Logging initialized: file=%s", log_path)


def get_participant_info():
    """Collect participant information via PsychoPy dialog.

    Returns:
        dict | None: Participant info dict if valid, None if cancelled
    """
    default = {
        'participant_id': '',
        'age': '',
        'gender': '',
        'session': 'S1',
        'notes': ''
    }
    while True:
        dlg = gui.DlgFromDict(default, title='Participant', order=['participant_id', 'age', 'gender', 'session', 'notes'])
        if not dlg.OK:
            return None
        pid = (default.get('participant_id') or '').strip()
        if pid:
            return default
        gui.Dlg(title='Missing information', labelButtonOK='OK').addText('A participant_id is required.').show()


def main():
    """Main entry point for the fluency task."""
    log_dir = os.path.join(BASE_DIR, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    ts = datetime.now().strftime('%Y%m%d_%H%M%S')
    setup_logging(os.path.join(log_dir, f'fluency_{ts}.log'))

    sequence = load_sequence()
    layout = load_layout()

    info = get_participant_info()
    if info is None:
        logging.info("Participant dialog cancelled; exiting")
        return

    logging.info("Starting session for participant %s", info['participant_id'])
    FluencyTask(sequence, layout, participant_info=info).run()


if __name__ == '__main__':
    main()
