"""Data models for the VarOmeter client.

Covers the converter's per-variant record, the normalized job status
vocabulary, the orchestrator's run states, and the per-attempt result wrapper
used instead of blanket exception suppression around remote calls.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable

from varometer.exceptions import VarOmeterError


def format_p_value(p_value: float) -> str:
    """Render a p-value for the textDataset CSV.

    Integral values print without a fractional part so the default of 1
    renders as ``1``, matching what the service's examples use.

    Example:
        >>> format_p_value(1.0)
        '1'
        >>> format_p_value(1e-8)
        '1e-08'
    """
    value = float(p_value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(slots=True, frozen=True)
class VariantRecord:
    """One VCF data row in VarOmeter textDataset form.

    Attributes:
        snp_id: Variant identifier (source ID, or synthesized when missing)
        p_value: Significance value assigned to every record
        chr_id: Chromosome with any ``chr`` prefix removed
        position: 1-based position, verbatim from the source
        allele1: Reference allele
        allele2: First alternate allele
    """

    snp_id: str
    p_value: float
    chr_id: str
    position: str
    allele1: str
    allele2: str

    def to_row(self) -> str:
        """Serialize as a comma-separated textDataset row."""
        return ",".join(
            (
                self.snp_id,
                format_p_value(self.p_value),
                self.chr_id,
                self.position,
                self.allele1,
                self.allele2,
            )
        )


class JobStatus(Enum):
    """Normalized status of a remote VarOmeter job."""

    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    UNKNOWN = auto()  # Unrecognized text; treated like RUNNING


@dataclass(frozen=True)
class StatusReading:
    """A status value observed from the service.

    Attributes:
        status: Normalized tag
        raw: Uppercased status text as received
    """

    status: JobStatus
    raw: str

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)


class RunState(Enum):
    """States of the run-and-wait orchestrator."""

    IDLE = auto()
    TRIGGERING = auto()
    POLLING = auto()
    COMPLETED = auto()
    FAILED = auto()
    TIMED_OUT = auto()


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of a single remote call: a value or the error it raised.

    Attributes:
        value: Parsed response when the call succeeded
        error: The VarOmeterError raised when it did not
    """

    value: Any = None
    error: VarOmeterError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def capture(cls, func: Callable[..., Any], *args: Any, **kwargs: Any) -> "AttemptResult":
        """Call ``func`` and wrap its return value or VarOmeterError.

        Errors outside the VarOmeterError hierarchy are programming errors
        and propagate unchanged.
        """
        try:
            return cls(value=func(*args, **kwargs))
        except VarOmeterError as e:
            return cls(error=e)
