"""Walkthrough pipeline and deployment migrations."""

from frac_estate.pipeline.deploy import (
    PRESETS,
    DeploymentPreset,
    deploy_mock_usdt,
    deploy_preset,
    deploy_property,
    fund_usdt,
)
from frac_estate.pipeline.steps import Pipeline, PipelineReport, StepResult
from frac_estate.pipeline.walkthrough import (
    WalkthroughSettings,
    build_walkthrough,
    run_walkthrough,
)

__all__ = [
    "DeploymentPreset",
    "PRESETS",
    "Pipeline",
    "PipelineReport",
    "StepResult",
    "WalkthroughSettings",
    "build_walkthrough",
    "deploy_mock_usdt",
    "deploy_preset",
    "deploy_property",
    "fund_usdt",
    "run_walkthrough",
]
