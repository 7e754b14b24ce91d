from .journal import JournalEntry, TrialJournal

__all__ = ["JournalEntry", "TrialJournal"]
