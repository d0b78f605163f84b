"""Provisioning clients that carry out plan operations."""
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from .commands import AzureCommandBuilder
from ..errors import ExecutionError
from ..plan.models import Operation, OperationKind

# Operation kind -> capability method name
CAPABILITIES = {
    OperationKind.CREATE_RESOURCE_GROUP: "create_resource_group",
    OperationKind.CREATE_VNET: "create_vnet",
    OperationKind.CREATE_NSG: "create_nsg",
    OperationKind.CREATE_NSG_RULE: "create_nsg_rule",
    OperationKind.CREATE_SUBNET: "create_subnet",
    OperationKind.CREATE_PERIMETER: "create_perimeter",
    OperationKind.CREATE_PERIMETER_PROFILE: "create_perimeter_profile",
    OperationKind.CREATE_PERIMETER_RULE: "create_perimeter_rule",
    OperationKind.CREATE_WORKSPACE: "create_workspace",
    OperationKind.CONFIGURE_NETWORK_WATCHER: "configure_network_watcher",
    OperationKind.CREATE_STORAGE_ACCOUNT: "create_storage_account",
    OperationKind.CREATE_FLOW_LOG: "create_flow_log",
    OperationKind.CREATE_DIAGNOSTIC_SETTINGS: "create_diagnostic_settings",
    OperationKind.CREATE_DASHBOARD: "create_dashboard",
}


class ProvisioningClient(ABC):
    """Base class for clients that provision landing-zone resources.

    Each resource kind is a separate capability so that clients can be
    swapped or mocked per kind.
    """

    def provision(self, operation: Operation) -> None:
        """Dispatch an operation to the matching capability.

        Raises:
            ExecutionError: If provisioning fails.
        """
        method = CAPABILITIES.get(operation.kind)
        if not method:
            raise ExecutionError(operation, f"unsupported operation kind {operation.kind}")
        getattr(self, method)(operation)

    @abstractmethod
    def create_resource_group(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_vnet(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_nsg(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_nsg_rule(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_subnet(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_perimeter(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_perimeter_profile(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_perimeter_rule(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_workspace(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def configure_network_watcher(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_storage_account(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_flow_log(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_diagnostic_settings(self, operation: Operation) -> None:
        pass

    @abstractmethod
    def create_dashboard(self, operation: Operation) -> None:
        pass


class AzureCliClient(ProvisioningClient):
    """Provisions resources by running the Azure CLI."""

    def __init__(self, subscription_id: Optional[str] = None, debug: bool = False):
        """Initialize the client.

        Args:
            subscription_id: Azure subscription ID; looked up with ``az account show`` when needed.
            debug: If True, print every Azure CLI command.
        """
        self.debug = debug
        self.commands = AzureCommandBuilder(subscription_id, subscription_lookup=self._get_default_subscription)

    def _get_default_subscription(self) -> str:
        """Get the default subscription ID from Azure CLI.

        Raises:
            subprocess.CalledProcessError: If Azure CLI command fails.
            RuntimeError: If Azure CLI reports no subscription.
        """
        cmd = ["az", "account", "show", "--query", "id", "-o", "tsv"]

        if self.debug:
            print(f"Debug: Running command: {' '.join(cmd)}")

        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True
        )

        subscription_id = result.stdout.strip()
        if not subscription_id:
            raise RuntimeError("az account show returned no subscription id")

        if self.debug:
            print(f"Debug: Using subscription ID: {subscription_id}")

        return subscription_id

    def _run(self, operation: Operation) -> None:
        try:
            cmd = self.commands.build(operation)
        except subprocess.CalledProcessError as e:
            raise ExecutionError(operation, f"could not resolve subscription: {_stderr(e)}") from e
        except RuntimeError as e:
            raise ExecutionError(operation, f"could not resolve subscription: {e}") from e
        except FileNotFoundError as e:
            raise ExecutionError(operation, f"Azure CLI not found: {e}") from e
        self._execute(operation, cmd)

    def _execute(self, operation: Operation, cmd: List[str]) -> None:
        if self.debug:
            print(f"Debug: Running command: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise ExecutionError(operation, _stderr(e)) from e
        except FileNotFoundError as e:
            raise ExecutionError(operation, f"Azure CLI not found: {e}") from e

    def create_resource_group(self, operation: Operation) -> None:
        self._run(operation)

    def create_vnet(self, operation: Operation) -> None:
        self._run(operation)

    def create_nsg(self, operation: Operation) -> None:
        self._run(operation)

    def create_nsg_rule(self, operation: Operation) -> None:
        self._run(operation)

    def create_subnet(self, operation: Operation) -> None:
        self._run(operation)

    def create_perimeter(self, operation: Operation) -> None:
        self._run(operation)

    def create_perimeter_profile(self, operation: Operation) -> None:
        self._run(operation)

    def create_perimeter_rule(self, operation: Operation) -> None:
        self._run(operation)

    def create_workspace(self, operation: Operation) -> None:
        self._run(operation)

    def configure_network_watcher(self, operation: Operation) -> None:
        self._run(operation)

    def create_storage_account(self, operation: Operation) -> None:
        self._run(operation)

    def create_flow_log(self, operation: Operation) -> None:
        self._run(operation)

    def create_diagnostic_settings(self, operation: Operation) -> None:
        self._run(operation)

    def create_dashboard(self, operation: Operation) -> None:
        self._run(operation)


def _stderr(error: subprocess.CalledProcessError) -> str:
    output = (error.stderr or error.stdout or "").strip()
    return output or str(error)
