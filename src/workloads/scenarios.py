"""Named logging scenarios run against every registered adapter.

Every scenario is executed unchanged against each adapter:
- without_fields: message only
- ten_fields_context: ten fields bound once, reused by every call
- ten_fields: ten fields attached on every call
- four_scalar_fields: four string fields attached on every call
- no_fields_disabled: message only, level suppressed
- no_fields_no_message_disabled: empty message, level suppressed
- ten_fields_disabled: ten per-call fields, level suppressed
- lot_of_fields: ten per-call fields at warning level, read against
  the ten_fields_context baseline
"""

from __future__ import annotations

from core.types import Attach, Level, Scenario
from workloads.fixtures import scalar_fields, ten_fields

__all__ = [
    "MESSAGE",
    "WITHOUT_FIELDS",
    "TEN_FIELDS_CONTEXT",
    "TEN_FIELDS",
    "FOUR_SCALAR_FIELDS",
    "NO_FIELDS_DISABLED",
    "NO_FIELDS_NO_MESSAGE_DISABLED",
    "TEN_FIELDS_DISABLED",
    "LOT_OF_FIELDS",
    "DEFAULT_SCENARIOS",
]

MESSAGE = "hello world"

WITHOUT_FIELDS = Scenario(
    name="without_fields",
    description="Logging without any structured context",
    message=MESSAGE,
    level=Level.INFO,
)

TEN_FIELDS_CONTEXT = Scenario(
    name="ten_fields_context",
    description="Logging with 10 fields bound in context",
    message=MESSAGE,
    level=Level.INFO,
    attach=Attach.CONTEXT,
    fields=ten_fields,
)

TEN_FIELDS = Scenario(
    name="ten_fields",
    description="Logging with 10 fields attached per call",
    message=MESSAGE,
    level=Level.INFO,
    attach=Attach.PER_CALL,
    fields=ten_fields,
)

FOUR_SCALAR_FIELDS = Scenario(
    name="four_scalar_fields",
    description="Logging with 4 string fields attached per call",
    message=MESSAGE,
    level=Level.WARNING,
    attach=Attach.PER_CALL,
    fields=scalar_fields,
)

NO_FIELDS_DISABLED = Scenario(
    name="no_fields_disabled",
    description="Message only, below the enabled level",
    message=MESSAGE,
    level=Level.WARNING,
    min_level=Level.ERROR,
)

NO_FIELDS_NO_MESSAGE_DISABLED = Scenario(
    name="no_fields_no_message_disabled",
    description="Empty message, below the enabled level",
    message="",
    level=Level.WARNING,
    min_level=Level.ERROR,
)

TEN_FIELDS_DISABLED = Scenario(
    name="ten_fields_disabled",
    description="10 fields attached per call, below the enabled level",
    message=MESSAGE,
    level=Level.WARNING,
    min_level=Level.ERROR,
    attach=Attach.PER_CALL,
    fields=ten_fields,
)

LOT_OF_FIELDS = Scenario(
    name="lot_of_fields",
    description="10 fields attached per call at warning level, against the context baseline",
    message=MESSAGE,
    level=Level.WARNING,
    attach=Attach.PER_CALL,
    fields=ten_fields,
    baseline=TEN_FIELDS_CONTEXT.name,
)

DEFAULT_SCENARIOS = (
    WITHOUT_FIELDS,
    TEN_FIELDS_CONTEXT,
    TEN_FIELDS,
    FOUR_SCALAR_FIELDS,
    NO_FIELDS_DISABLED,
    NO_FIELDS_NO_MESSAGE_DISABLED,
    TEN_FIELDS_DISABLED,
    LOT_OF_FIELDS,
)
