"""Application services.

``release`` holds the GitFlow release workflows: pure policy (versions,
classification, notes) plus the orchestration that drives GitHub through a
``RepositoryGateway``.
"""
