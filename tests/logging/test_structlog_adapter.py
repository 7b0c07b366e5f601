# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for StructlogAdapter — the LoggingPort implementation."""

import logging

from mlsession.core.config import Config
from mlsession.logging import configure_logging
from mlsession.logging.port import LoggingPort
from mlsession.logging.structlog_adapter import StructlogAdapter


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"mlsession": {"logging": {"level": {"root": "DEBUG"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"mlsession": {"logging": {"format": "json"}}}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config(
            {"mlsession": {"logging": {"level": {"root": "INFO", "mlsession.session": "debug"}}}}
        )
        adapter.configure(config)
        assert adapter._module_levels == {"mlsession.session": "DEBUG"}
        assert logging.getLogger("mlsession.session").level == logging.DEBUG

    def test_env_level_string(self, monkeypatch):
        monkeypatch.setenv("MLSESSION_LOGGING_LEVEL", "warning")
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "WARNING"


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("mlsession.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        adapter.set_level("mlsession.client", "ERROR")
        assert logging.getLogger("mlsession.client").level == logging.ERROR

    def test_stdlib_records_rendered_as_json(self, capsys):
        adapter = StructlogAdapter()
        adapter.configure(Config({"mlsession": {"logging": {"format": "json"}}}))
        logging.getLogger("mlsession.session.adapters.marklogic").warning("store %s", "down")
        out = capsys.readouterr().out
        assert '"event": "store down"' in out
        assert '"level": "warning"' in out


def test_configure_logging_returns_adapter():
    assert isinstance(configure_logging(Config({})), LoggingPort)
