"""VarOmeter API endpoints.

Thin wrappers over ``VarOmeterClient.request``; each fixes the path, method,
body shape and request policy of one operation.
"""

from typing import Any, Mapping, Optional

from varometer.client import VarOmeterClient
from varometer.config import (
    DEFAULT_POLICY,
    EXPERIMENT_POLICY,
    RESULTS_POLICY,
    RUN_POLICY,
)

PROJECTS_PATH = "/api/projects"
EXPERIMENT_PATH = "/api/gwasform"
RUN_PATH = "/api/rungwas"
RESULTS_PATH = "/api/resultsGwas"


def create_project(client: VarOmeterClient, title: str, description: str = "") -> Any:
    """Create a new project.

    Endpoint: POST /api/projects
    """
    body = {"title": title, "description": description}
    return client.request("POST", PROJECTS_PATH, body=body, policy=DEFAULT_POLICY)


def delete_project(client: VarOmeterClient, project_id: str) -> Any:
    """Delete a project.

    Endpoint: DELETE /api/projects. The service expects the id as a bare
    JSON string body, not an object.
    """
    return client.request("DELETE", PROJECTS_PATH, body=str(project_id), policy=DEFAULT_POLICY)


def create_experiment(
    client: VarOmeterClient,
    title: str,
    project_id: str,
    text_dataset: str,
    description: str = "",
    parameters: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Create a VarOmeter experiment (GWAS form).

    Endpoint: POST /api/gwasform

    Args:
        client: Configured API client
        title: Experiment title
        project_id: Project the experiment belongs to
        text_dataset: CSV string from ``vcf_to_text_dataset``
        description: Optional description
        parameters: Extra analysis parameters (lncRNA, miRNA, pvalue, ...)

    Returns:
        Parsed API response
    """
    params: dict[str, Any] = dict(parameters or {})
    params["textDataset"] = text_dataset

    body = {
        "title": title,
        "description": description,
        "project": project_id,
        "parameters": params,
    }
    return client.request("POST", EXPERIMENT_PATH, body=body, policy=EXPERIMENT_POLICY)


def run_experiment(client: VarOmeterClient, experiment_id: str) -> Any:
    """Trigger a VarOmeter run.

    Endpoint: GET /api/rungwas with a JSON body. The backend is slow to
    answer and often returns 524, hence the longer timeout and extra tries.
    """
    body = {"experimentId": experiment_id}
    return client.request("GET", RUN_PATH, body=body, policy=RUN_POLICY)


def get_results(client: VarOmeterClient, experiment_id: str) -> Any:
    """Fetch VarOmeter results (and status) for an experiment.

    Endpoint: GET /api/resultsGwas with a JSON body.
    """
    body = {"gwasExperimentId": experiment_id}
    return client.request("GET", RESULTS_PATH, body=body, policy=RESULTS_POLICY)
