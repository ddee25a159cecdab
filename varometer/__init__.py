"""
VarOmeter API client.

Converts VCF files into the VarOmeter textDataset format, submits GWAS-form
experiments and waits for their results on the enios platform.
"""

from varometer.client import VarOmeterClient, build_headers
from varometer.config import RequestPolicy, Settings
from varometer.converter import iter_variant_records, vcf_to_text_dataset
from varometer.endpoints import (
    create_experiment,
    create_project,
    delete_project,
    get_results,
    run_experiment,
)
from varometer.exceptions import (
    ConfigurationError,
    ExtractionError,
    FormatError,
    NotFoundError,
    RequestError,
    RunFailureError,
    RunTimeoutError,
    VarOmeterError,
)
from varometer.models import JobStatus, RunState, VariantRecord
from varometer.orchestrator import RunWaiter, run_and_wait, wait_for_results
from varometer.utils import extract_id

__version__ = "0.1.0"

__all__ = [
    "VarOmeterClient",
    "build_headers",
    "RequestPolicy",
    "Settings",
    "iter_variant_records",
    "vcf_to_text_dataset",
    "create_project",
    "delete_project",
    "create_experiment",
    "run_experiment",
    "get_results",
    "RunWaiter",
    "run_and_wait",
    "wait_for_results",
    "extract_id",
    "JobStatus",
    "RunState",
    "VariantRecord",
    "VarOmeterError",
    "ConfigurationError",
    "NotFoundError",
    "FormatError",
    "RequestError",
    "RunFailureError",
    "RunTimeoutError",
    "ExtractionError",
]
