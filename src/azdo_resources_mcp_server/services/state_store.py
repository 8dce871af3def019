"""Local state file management service."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class StateStore:
    """Service for managing the resource state file.

    Records are keyed by resource address (`<type>.<name>`) and hold the
    resource type, the configuration it was applied with and its state.
    """

    def __init__(self, state_file: Path):
        self.state_file = state_file

    def load_states(self) -> dict[str, dict]:
        """Load all resource records from file."""
        if not self.state_file.exists():
            return {}
        try:
            return json.loads(self.state_file.read_text())
        except json.JSONDecodeError:
            logger.warning("State file %s is not valid JSON, starting empty", self.state_file)
            return {}

    def save_states(self, states: dict[str, dict]) -> None:
        """Save resource records to file atomically."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file then rename for atomicity
        temp_file = self.state_file.with_suffix(".tmp")
        temp_file.write_text(json.dumps(states, indent=2, sort_keys=True))
        temp_file.replace(self.state_file)

    def put_state(self, address: str, record: dict) -> None:
        """Add or update a resource record."""
        states = self.load_states()
        states[address] = record
        self.save_states(states)

    def remove_state(self, address: str) -> dict | None:
        """Remove a resource record. Returns the removed record or None."""
        states = self.load_states()
        record = states.pop(address, None)
        self.save_states(states)
        return record

    def get_state(self, address: str) -> dict | None:
        return self.load_states().get(address)

    def has_state(self, address: str) -> bool:
        return address in self.load_states()
