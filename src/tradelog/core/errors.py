"""Custom exception hierarchy for the journal analytics engine."""


class JournalError(Exception):
    """Base exception for all journal analytics errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Data ---
class TradeDataError(JournalError):
    """A raw record cannot be interpreted as a trade.

    Raised only at the ingestion boundary.  The calculation components
    never raise on bad data; they degrade to zero or "no data" results.
    """

    def __init__(self, trade_id: str, reason: str):
        self.trade_id = trade_id
        self.reason = reason
        super().__init__(f"Trade [{trade_id or '?'}]: {reason}")
