"""Unit tests for CloneClient."""

import pytest

from vsphere_clone.client import CloneClient
from vsphere_clone.config import BuildConfig, CloneConfig
from vsphere_clone.exceptions import PreCleanError, VMNotFoundError
from vsphere_clone.simulator import InMemoryDriver


@pytest.fixture
def driver():
    return InMemoryDriver(templates=["templates/base-vm"])


class TestCloneClient:
    """Test clone builds through the client."""

    @pytest.mark.unit
    def test_client_defaults(self, mock_driver):
        client = CloneClient(mock_driver)
        assert client.timeout == 3600
        assert client.ui is not None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_clone(self, driver, build_config, ui):
        client = CloneClient(driver, ui=ui)

        result = await client.clone_vm(build_config)

        assert result.success is True
        assert result.error is None
        assert result.cancelled is False
        assert result.template == "base-vm"
        assert result.vm_path == "builds/build-vm"
        assert result.vm.path == "builds/build-vm"
        assert result.validation.valid is True
        assert result.duration >= 0
        assert "builds/build-vm" in driver.list_vms()
        assert ui.said == ["Cloning VM..."]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_operation_ids_are_unique(self, mock_driver, build_config):
        client = CloneClient(mock_driver)

        first = await client.clone_vm(build_config)
        second = await client.clone_vm(build_config)

        assert first.operation_id != second.operation_id

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_validation_failure_skips_driver(self, mock_driver, location):
        client = CloneClient(mock_driver)
        build = BuildConfig(clone=CloneConfig(linked_clone=True, disk_size=10), location=location)

        result = await client.clone_vm(build)

        assert result.success is False
        assert result.error.startswith("Validation failed:")
        assert "'template' is required" in result.validation.errors
        mock_driver.pre_clean_vm.assert_not_awaited()
        mock_driver.find_vm.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_pre_clean_failure(self, mock_driver, build_config):
        mock_driver.pre_clean_vm.side_effect = PreCleanError("VM exists", "builds/build-vm")
        client = CloneClient(mock_driver)

        result = await client.clone_vm(build_config)

        assert result.success is False
        assert result.error == "Pre-clean of 'builds/build-vm' failed: VM exists"
        mock_driver.find_vm.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_template_not_found(self, mock_driver, build_config):
        mock_driver.find_vm.side_effect = VMNotFoundError("base-vm")
        client = CloneClient(mock_driver)

        result = await client.clone_vm(build_config)

        assert result.success is False
        assert result.error == "Error finding vm to clone: VM 'base-vm' not found"
        assert result.vm is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clone_returning_nothing(self, mock_driver, template_vm, build_config):
        template_vm.clone.return_value = None
        client = CloneClient(mock_driver)

        result = await client.clone_vm(build_config)

        assert result.success is False
        assert result.vm is None
        assert "no virtual machine and no error" in result.error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_destroy_removes_vm_after_build(self, driver, location, ui):
        build = BuildConfig(
            clone=CloneConfig(template="base-vm", destroy=True), location=location
        )
        client = CloneClient(driver, ui=ui)

        result = await client.clone_vm(build)

        assert result.success is True
        assert result.destroy_vm is True
        assert result.vm is None
        assert driver.list_vms() == ["templates/base-vm"]
        assert "Destroying VM..." in ui.said
        assert any("will be destroyed" in m for m in ui.messages)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout_cancels_build(self, build_config):
        driver = InMemoryDriver(templates=["base-vm"], clone_delay=5)
        client = CloneClient(driver, timeout=0.05)

        result = await client.clone_vm(build_config)

        assert result.success is False
        assert result.cancelled is True
        assert result.error == "Timeout during clone after 0.05s"
        assert "builds/build-vm" not in driver.list_vms()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_context_manager_closes_driver(self, mock_driver):
        async with CloneClient(mock_driver) as client:
            assert client.driver is mock_driver

        mock_driver.close.assert_awaited_once()
