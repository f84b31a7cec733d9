# sharemarkets/core/roles.py

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional
from .events import EventLog, create_fee_config_event
from .fees import FeeConfig, DEFAULT_FEE_CONFIG

logger = logging.getLogger(__name__)

class NotOwnerError(Exception):
    """Raised when someone other than the owner changes fee settings."""
    pass

class FeeConfigSource(ABC):
    """
    Abstract base class for whatever decides the fee destinations and percentages
    a market trades with.
    """
    @abstractmethod
    def fee_config(self) -> FeeConfig:
        """
        Get the fee configuration in force right now.
        """
        pass

class FixedFeeConfig(FeeConfigSource):
    """
    Basic source that always returns the same configuration.
    """
    def __init__(self, config: FeeConfig = DEFAULT_FEE_CONFIG):
        self._config = config

    def fee_config(self) -> FeeConfig:
        return self._config

class FeeAdmin(FeeConfigSource):
    """
    Owner-controlled fee configuration. Only the owner may change settings;
    readers get an immutable snapshot.
    """
    def __init__(self, owner: str, config: FeeConfig = DEFAULT_FEE_CONFIG,
                 event_log: Optional[EventLog] = None):
        self.owner = owner
        self._config = config
        self._event_log = event_log

    def fee_config(self) -> FeeConfig:
        return self._config

    def transfer_ownership(self, caller: str, new_owner: str):
        self._only_owner(caller)
        if not new_owner:
            raise ValueError("Ownable: new owner is the zero address")
        self.owner = new_owner
        self._record("owner", new_owner)

    def set_fee_destination(self, caller: str, destination: str):
        self._update(caller, protocol_fee_destination=destination)

    def set_fee_b_destination(self, caller: str, destination: str):
        self._update(caller, protocol_b_fee_destination=destination)

    def set_protocol_fee_percent(self, caller: str, percent: int):
        self._update(caller, protocol_fee_percent=percent)

    def set_protocol_b_fee_percent(self, caller: str, percent: int):
        self._update(caller, protocol_b_fee_percent=percent)

    def set_subject_fee_percent(self, caller: str, percent: int):
        self._update(caller, subject_fee_percent=percent)

    def _update(self, caller: str, **changes):
        self._only_owner(caller)
        # replace() re-runs FeeConfig validation
        self._config = replace(self._config, **changes)
        for setting, value in changes.items():
            self._record(setting, value)

    def _only_owner(self, caller: str):
        if caller != self.owner:
            raise NotOwnerError("Ownable: caller is not the owner")

    def _record(self, setting: str, value):
        logger.info("Fee setting %s changed to %s", setting, value)
        if self._event_log is not None:
            self._event_log.emit(create_fee_config_event(setting, value))
