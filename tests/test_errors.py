"""Tests for the pipeline error taxonomy."""

from pathlib import Path

from lane_notifier.errors import (
    ErrorKind,
    MissingCredentialsError,
    MissingDirectoryError,
    PipelineError,
    ProcessFailureError,
    ReadinessTimeoutError,
    StorageConfigurationError,
    TransferFailureError,
    render_error,
)
from lane_notifier.types import Stage


class TestErrorKinds:
    """Each error class is tagged with its kind."""

    def test_kinds(self) -> None:
        assert ReadinessTimeoutError(90).kind == ErrorKind.TIMEOUT
        assert (
            ProcessFailureError(Stage.BUILD, 1, "lane build").kind
            == ErrorKind.PROCESS_FAILURE
        )
        assert MissingDirectoryError(Path("x")).kind == ErrorKind.MISSING_DIRECTORY
        assert TransferFailureError("a.bin", "boom").kind == ErrorKind.TRANSFER_FAILURE
        assert (
            MissingCredentialsError(("A", "B")).kind == ErrorKind.MISSING_CREDENTIALS
        )
        assert (
            StorageConfigurationError("x", "bad").kind
            == ErrorKind.STORAGE_CONFIGURATION
        )

    def test_all_are_pipeline_errors(self) -> None:
        """Every stage error should share the PipelineError base."""
        assert isinstance(ReadinessTimeoutError(1), PipelineError)
        assert isinstance(MissingDirectoryError(Path("x")), PipelineError)

    def test_codes(self) -> None:
        assert ProcessFailureError(Stage.BUILD, 2, "c").code == "build_failed"
        assert ProcessFailureError(Stage.EXPORT, 2, "c").code == "export_failed"
        assert ReadinessTimeoutError(1).code == "dependency_timeout"


class TestRenderError:
    """Tests for render_error."""

    def test_readiness_timeout(self) -> None:
        error = ReadinessTimeoutError(90.0)
        assert render_error(error) == "Docker did not become ready within 90 seconds"
        assert str(error) == render_error(error)

    def test_process_failure_with_exit_code(self) -> None:
        error = ProcessFailureError(Stage.BUILD, 3, "lane build prod")
        assert render_error(error) == "Lane build failed with exit code 3"
        assert error.exit_code == 3
        assert error.command == "lane build prod"

    def test_process_failure_without_exit_code(self) -> None:
        error = ProcessFailureError(
            Stage.EXPORT, None, "lane export", reason="could not start process"
        )
        assert render_error(error) == "Lane export failed: could not start process"

    def test_missing_directory(self) -> None:
        error = MissingDirectoryError(Path("lane-export-temp"))
        assert "lane-export-temp" in render_error(error)
        assert "does not exist" in render_error(error)

    def test_transfer_failure_with_status(self) -> None:
        error = TransferFailureError("a.bin", "unexpected response", status_code=503)
        assert render_error(error) == (
            "Failed to upload a.bin: upload failed with status code 503"
        )

    def test_transfer_failure_reason(self) -> None:
        error = TransferFailureError("a.bin", "connection reset")
        assert render_error(error) == "Failed to upload a.bin: connection reset"

    def test_missing_credentials(self) -> None:
        error = MissingCredentialsError(("AWS_ACCESS_KEY_ID", "TIGRIS_ACCESS_KEY_ID"))
        assert render_error(error) == (
            "AWS_ACCESS_KEY_ID or TIGRIS_ACCESS_KEY_ID environment variable not set"
        )

    def test_storage_configuration(self) -> None:
        error = StorageConfigurationError("t3.storage.dev", "Invalid endpoint")
        assert render_error(error) == (
            "Cannot create storage client for t3.storage.dev: Invalid endpoint"
        )
        assert error.code == "storage_configuration"
