"""
Test the exception hierarchy and logging setup.
"""

import logging
import pytest
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import spatial3d
from spatial3d.exceptions import (
    GeometryError,
    DegenerateGeometryError,
    GeometryOperationError,
    ParallelGeometryError,
    SingularFrameError,
    GeometryFormatError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
)
from spatial3d.logging_config import LOG_LEVEL_ENV, get_log_level, setup_logging


class TestHierarchy:
    """Base classes and builtin compatibility."""

    @pytest.mark.parametrize("cls, bases", [
        (DegenerateGeometryError, (GeometryError, ValueError)),
        (GeometryFormatError, (GeometryError, ValueError)),
        (GeometryOperationError, (GeometryError, RuntimeError)),
        (ParallelGeometryError, (GeometryOperationError,)),
        (SingularFrameError, (GeometryOperationError,)),
        (ConfigNotFoundError, (ConfigurationError, GeometryError)),
        (ConfigValidationError, (ConfigurationError, GeometryError)),
    ])
    def test_bases(self, cls, bases):
        for base in bases:
            assert issubclass(cls, base)

    def test_exported_from_package(self):
        assert spatial3d.DegenerateGeometryError is DegenerateGeometryError
        assert spatial3d.ConfigValidationError is ConfigValidationError


class TestMessages:
    """Message and details formatting."""

    def test_details_in_str(self):
        error = GeometryError("Bad input", details={"norm": 0.0})
        assert str(error) == "Bad input (norm=0.0)"
        assert error.message == "Bad input"

    def test_no_details(self):
        assert str(GeometryError("Bad input")) == "Bad input"
        assert GeometryError("Bad input").details == {}

    def test_parallel(self):
        error = ParallelGeometryError("Planes", 1e-7)
        assert error.message == "Planes are parallel"
        assert error.details == {"tolerance": 1e-7}

    def test_singular(self):
        error = SingularFrameError("Singular matrix")
        assert "cannot be inverted" in str(error)
        assert error.details["reason"] == "Singular matrix"

    def test_format(self):
        error = GeometryFormatError("Point3D", "1, 2")
        assert error.message == "Could not parse a Point3D from the string '1, 2'"
        assert error.details == {"type": "Point3D"}

    def test_config_errors(self):
        assert ConfigNotFoundError("a.yaml").details == {"path": "a.yaml"}
        error = ConfigValidationError("entities.0.radius", "must be >= 0", -1)
        assert error.details == {"key": "entities.0.radius", "reason": "must be >= 0", "value": "-1"}
        assert "entities.0.radius" in str(error)


class TestLogging:
    """Package logger configuration."""

    def teardown_method(self):
        logger = logging.getLogger("spatial3d")
        for handler in list(logger.handlers):
            if not isinstance(handler, logging.NullHandler):
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(logging.NOTSET)

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert get_log_level() == logging.DEBUG
        monkeypatch.setenv(LOG_LEVEL_ENV, "nonsense")
        assert get_log_level() == logging.WARNING

    def test_setup_is_idempotent(self):
        logger = setup_logging(logging.INFO)
        setup_logging(logging.INFO)
        streams = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)
                   and not isinstance(h, logging.FileHandler)]
        assert len(streams) == 1
        assert logger.level == logging.INFO

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "spatial3d.log"
        logger = setup_logging(logging.DEBUG, str(log_file))
        logging.getLogger("spatial3d.geometry.plane").debug("plane message")
        for handler in logger.handlers:
            handler.flush()
        assert "plane message" in log_file.read_text(encoding="utf-8")
