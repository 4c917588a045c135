from enum import Enum

class FinalOutcome(str, Enum):
    CANCEL = "cancel"    # Order gets cancelled after a short delay
    STALL = "stall"      # No further update, stays at the last intermediate status
    DELIVER = "deliver"  # Order is delivered after a longer delay
