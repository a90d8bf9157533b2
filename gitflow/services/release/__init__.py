from gitflow.services.release.classify import classify
from gitflow.services.release.config import FlowConfig, load_flow_config
from gitflow.services.release.dispatch import run_dispatch
from gitflow.services.release.errors import FlowError
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.pull_request import (
    run_pull_request_merged,
    run_pull_request_synchronize,
)
from gitflow.services.release.service import run_trigger

__all__ = [
    "FlowConfig",
    "FlowError",
    "RepositoryGateway",
    "classify",
    "load_flow_config",
    "run_dispatch",
    "run_pull_request_merged",
    "run_pull_request_synchronize",
    "run_trigger",
]
