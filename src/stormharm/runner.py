"""Run the project's pipelines through a Kedro session.

``python -m stormharm`` and ``kedro run`` take the same path: the
project is bootstrapped from its ``pyproject.toml``, configuration is
read from ``conf/`` by the ``OmegaConfigLoader`` named in settings.py,
and the session's ``SequentialRunner`` executes the pipeline.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from kedro.config import OmegaConfigLoader
from kedro.framework.session import KedroSession
from kedro.framework.startup import bootstrap_project

from stormharm.download import fetch_storm_data

logger = logging.getLogger(__name__)


def load_parameters(
    project_path: str | Path,
    runtime_params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Read the merged ``parameters*.yml`` of the project's base and local envs."""
    config_loader = OmegaConfigLoader(
        conf_source=str(Path(project_path) / "conf"),
        base_env="base",
        default_run_env="local",
        runtime_params=runtime_params,
    )
    return config_loader["parameters"]


def run_project(
    project_path: str | Path,
    pipeline_name: str | None = None,
    runtime_params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Run a registered pipeline (``__default__`` when None).

    Returns:
        The pipeline's free outputs, loaded from their datasets.
    """
    project_path = Path(project_path).resolve()
    bootstrap_project(project_path)

    with KedroSession.create(
        project_path=project_path, runtime_params=runtime_params
    ) as session:
        outputs = session.run(pipeline_name=pipeline_name)

    return {name: dataset.load() for name, dataset in outputs.items()}


def build_report(
    project_path: str | Path,
    runtime_params: dict[str, Any] | None = None,
) -> str:
    """Fetch the raw data if it is missing, then run the default pipeline.

    Returns:
        Path of the written report.
    """
    parameters = load_parameters(project_path, runtime_params)

    raw_data_path = Path(parameters["raw_data_path"])
    if not raw_data_path.exists() and parameters.get("source_url"):
        fetch_storm_data(parameters["source_url"], str(raw_data_path))

    outputs = run_project(project_path, runtime_params=runtime_params)
    report_path = outputs["storm_report_path"]
    logger.info("Storm report ready: %s", report_path)
    return report_path
