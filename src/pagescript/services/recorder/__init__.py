from .recorder import Recorder, RecorderState, RecordingSession
from .selector import generate_selector
from .synthesizer import synthesize

__all__ = ["Recorder", "RecorderState", "RecordingSession", "generate_selector", "synthesize"]
