class FlowscopeError(Exception):
    """Base class for errors raised by the topology service."""


class ContainerNotFound(FlowscopeError, LookupError):
    def __init__(self, container_id: str, message: str = "Container not found"):
        super().__init__(f"{message}: {container_id}")
        self.id = container_id
        self.message = message


class FlowchartNotFound(FlowscopeError, LookupError):
    def __init__(self, flowchart_id: str):
        super().__init__(f"Flowchart not found: {flowchart_id}")
        self.id = flowchart_id
        self.message = "Flowchart not found"


class UpstreamUnavailable(FlowscopeError, RuntimeError):
    """The container runtime could not be reached or answered garbage."""


class ActionRejected(FlowscopeError, RuntimeError):
    """The runtime received a lifecycle command and refused it."""
