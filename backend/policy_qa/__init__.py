"""Policy QA: question answering over indexed policy documents."""

__version__ = "0.1.0"
