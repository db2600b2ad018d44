"""Test configuration and fixtures for vsphere-clone."""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vsphere_clone.config import BuildConfig, CloneConfig, LocationConfig  # noqa: E402
from vsphere_clone.driver import Driver, VirtualMachine  # noqa: E402
from vsphere_clone.state import BuildState  # noqa: E402


class RecordingUi:
    """Ui that keeps everything it was told."""

    def __init__(self):
        self.said = []
        self.messages = []
        self.errors = []

    def say(self, message):
        self.said.append(message)

    def message(self, message):
        self.messages.append(message)

    def error(self, message):
        self.errors.append(message)


def make_vm(name="vm"):
    """Mock VM handle with async clone/destroy."""
    vm = Mock(spec=VirtualMachine)
    vm.name = name
    vm.clone = AsyncMock()
    vm.destroy = AsyncMock()
    return vm


@pytest.fixture
def vm_factory():
    return make_vm


@pytest.fixture
def ui():
    return RecordingUi()


@pytest.fixture
def template_vm():
    """Template whose clone returns a fresh VM handle."""
    template = make_vm("base-vm")
    template.clone.return_value = make_vm("build-vm")
    return template


@pytest.fixture
def mock_driver(template_vm):
    """Driver that pre-cleans fine and resolves the template."""
    driver = Mock(spec=Driver)
    driver.pre_clean_vm = AsyncMock(return_value=None)
    driver.find_vm = AsyncMock(return_value=template_vm)
    driver.close = AsyncMock(return_value=None)
    return driver


@pytest.fixture
def state(ui, mock_driver):
    return BuildState(ui=ui, driver=mock_driver)


@pytest.fixture
def clone_config():
    return CloneConfig(template="base-vm", network="VM Network")


@pytest.fixture
def location():
    return LocationConfig(
        vm_name="build-vm",
        folder="builds",
        cluster="cluster01",
        resource_pool="pool",
        datastore="datastore1",
    )


@pytest.fixture
def build_config(clone_config, location):
    return BuildConfig(clone=clone_config, location=location)


@pytest.fixture
def build_data():
    """Raw build document as it would appear in YAML."""
    return {
        "clone": {
            "template": "base-vm",
            "network": "VM Network",
            "mac_address": "00:50:56:AA:BB:CC",
            "notes": "nightly",
            "disk_controller_type": ["pvscsi"],
            "storage": [
                {"disk_size": 4096, "disk_thin_provisioned": True},
                {"disk_size": 8192, "disk_eagerly_scrub": True},
            ],
        },
        "location": {
            "vm_name": "build-vm",
            "folder": "builds",
            "cluster": "cluster01",
        },
    }
