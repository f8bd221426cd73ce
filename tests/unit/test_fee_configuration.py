"""Тесты для FeeConfiguration.

Coverage:
- Значения по умолчанию
- Immutable снапшоты
- Частичное обновление (mapping, FeeConfigUpdate, kwargs)
- Отклонение значений вне диапазона без изменения состояния
- Атомарность снапшотов при параллельных update/get
"""

import logging
import math
import threading

import pytest
from jsonschema import ValidationError as ContractValidationError
from pydantic import ValidationError

from src.core.domain.fee_config import FeeConfig, FeeConfigUpdate
from src.core.math.monetary import InvalidInputError
from src.fees.configuration import FeeConfiguration


@pytest.fixture
def configuration():
    """Fixture: конфигурация со значениями по умолчанию."""
    return FeeConfiguration()


class TestDefaults:
    """Начальное состояние."""

    def test_default_values(self, configuration):
        snapshot = configuration.get()
        assert snapshot.app_fee_rate == 0.01
        assert snapshot.withdrawal_flat_fee == 1000
        assert snapshot.api_commission_rate == 0.02

    def test_initial_snapshot(self):
        initial = FeeConfig(app_fee_rate=0.05, withdrawal_flat_fee=0, api_commission_rate=0)
        configuration = FeeConfiguration(initial)
        assert configuration.get() == initial

    def test_from_mapping_merges_with_defaults(self):
        configuration = FeeConfiguration.from_mapping({"withdrawal_flat_fee": 500})
        snapshot = configuration.get()
        assert snapshot.withdrawal_flat_fee == 500
        assert snapshot.app_fee_rate == 0.01
        assert snapshot.api_commission_rate == 0.02

    def test_from_mapping_rejects_unknown_field(self):
        with pytest.raises(ContractValidationError):
            FeeConfiguration.from_mapping({"FRAIS_APP": 0.01})


class TestSnapshots:
    """get() возвращает immutable снапшот."""

    def test_snapshot_cannot_be_mutated(self, configuration):
        snapshot = configuration.get()
        with pytest.raises(ValidationError):
            snapshot.app_fee_rate = 0.5
        assert configuration.get().app_fee_rate == 0.01

    def test_repeated_get_returns_equal_snapshots(self, configuration):
        assert configuration.get() == configuration.get()

    def test_old_snapshot_survives_update(self, configuration):
        before = configuration.get()
        configuration.update({"app_fee_rate": 0.05})
        assert before.app_fee_rate == 0.01
        assert configuration.get().app_fee_rate == 0.05


class TestUpdate:
    """Частичное обновление."""

    def test_empty_update_leaves_every_field_unchanged(self, configuration):
        before = configuration.get()
        after = configuration.update({})
        assert after == before
        assert configuration.get() == before

    def test_update_without_arguments(self, configuration):
        assert configuration.update() == FeeConfig()

    def test_partial_update_keeps_omitted_fields(self, configuration):
        snapshot = configuration.update({"api_commission_rate": 0.03})
        assert snapshot.api_commission_rate == 0.03
        assert snapshot.app_fee_rate == 0.01
        assert snapshot.withdrawal_flat_fee == 1000

    def test_update_returns_current_snapshot(self, configuration):
        snapshot = configuration.update({"withdrawal_flat_fee": 2000})
        assert snapshot == configuration.get()

    def test_update_with_model(self, configuration):
        snapshot = configuration.update(FeeConfigUpdate(app_fee_rate=0.015))
        assert snapshot.app_fee_rate == 0.015
        assert snapshot.api_commission_rate == 0.02

    def test_update_with_keyword_arguments(self, configuration):
        snapshot = configuration.update(withdrawal_flat_fee=0, api_commission_rate=0.0)
        assert snapshot.withdrawal_flat_fee == 0
        assert snapshot.api_commission_rate == 0.0

    def test_keyword_arguments_override_mapping(self, configuration):
        snapshot = configuration.update({"app_fee_rate": 0.02}, app_fee_rate=0.03)
        assert snapshot.app_fee_rate == 0.03

    def test_last_writer_wins_per_field(self, configuration):
        configuration.update({"app_fee_rate": 0.02})
        configuration.update({"app_fee_rate": 0.04, "withdrawal_flat_fee": 10})
        snapshot = configuration.get()
        assert snapshot.app_fee_rate == 0.04
        assert snapshot.withdrawal_flat_fee == 10

    def test_reset_restores_defaults(self, configuration):
        configuration.update({"app_fee_rate": 0.2, "withdrawal_flat_fee": 0})
        assert configuration.reset() == FeeConfig()
        assert configuration.get() == FeeConfig()

    def test_update_is_logged(self, configuration, caplog):
        with caplog.at_level(logging.INFO, logger="src.fees.configuration"):
            configuration.update({"app_fee_rate": 0.05})
        assert "FEE_CONFIG_UPDATED" in caplog.text


class TestUpdateValidation:
    """Значения вне диапазона отклоняются, состояние не меняется."""

    def test_rate_equal_to_one_rejected(self, configuration):
        with pytest.raises(InvalidInputError, match="app_fee_rate"):
            configuration.update({"app_fee_rate": 1.0})
        assert configuration.get() == FeeConfig()

    def test_negative_rate_rejected(self, configuration):
        with pytest.raises(InvalidInputError, match="api_commission_rate"):
            configuration.update(api_commission_rate=-0.01)
        assert configuration.get().api_commission_rate == 0.02

    def test_negative_flat_fee_rejected(self, configuration):
        with pytest.raises(InvalidInputError, match="withdrawal_flat_fee"):
            configuration.update({"withdrawal_flat_fee": -1})

    def test_infinite_flat_fee_rejected(self, configuration):
        with pytest.raises(InvalidInputError, match="must be finite"):
            configuration.update({"withdrawal_flat_fee": math.inf})

    def test_rejected_update_applies_no_field(self, configuration):
        """Одно невалидное поле отменяет всё обновление"""
        with pytest.raises(InvalidInputError):
            configuration.update({"withdrawal_flat_fee": 0, "app_fee_rate": 2.0})
        assert configuration.get().withdrawal_flat_fee == 1000

    def test_unknown_field_rejected_by_contract(self, configuration):
        with pytest.raises(ContractValidationError):
            configuration.update({"points_ratio": 0.01})

    def test_non_numeric_value_rejected_by_contract(self, configuration):
        with pytest.raises(ContractValidationError):
            configuration.update({"app_fee_rate": "0.01"})

    def test_rejection_is_logged(self, configuration, caplog):
        with caplog.at_level(logging.WARNING, logger="src.fees.configuration"):
            with pytest.raises(InvalidInputError):
                configuration.update({"app_fee_rate": 5})
        assert "FEE_CONFIG_UPDATE_REJECTED" in caplog.text


class TestConcurrency:
    """Читатель никогда не видит наполовину обновлённую конфигурацию."""

    def test_readers_only_observe_whole_snapshots(self):
        config_a = {"app_fee_rate": 0.01, "withdrawal_flat_fee": 1000, "api_commission_rate": 0.02}
        config_b = {"app_fee_rate": 0.05, "withdrawal_flat_fee": 250, "api_commission_rate": 0.07}
        allowed = {
            tuple(config_a.values()),
            tuple(config_b.values()),
        }

        configuration = FeeConfiguration()
        stop = threading.Event()
        observed_mixed = []

        def writer(values):
            for _ in range(300):
                configuration.update(values)

        def reader():
            while not stop.is_set():
                snapshot = configuration.get()
                fields = (
                    snapshot.app_fee_rate,
                    snapshot.withdrawal_flat_fee,
                    snapshot.api_commission_rate,
                )
                if fields not in allowed:
                    observed_mixed.append(fields)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        writers = [
            threading.Thread(target=writer, args=(config_a,)),
            threading.Thread(target=writer, args=(config_b,)),
        ]
        for thread in readers + writers:
            thread.start()
        for thread in writers:
            thread.join()
        stop.set()
        for thread in readers:
            thread.join()

        assert observed_mixed == []
        final = configuration.get()
        assert (
            final.app_fee_rate,
            final.withdrawal_flat_fee,
            final.api_commission_rate,
        ) in allowed

    def test_concurrent_partial_updates_are_not_lost(self):
        """Разные поля из разных потоков: оба изменения сохраняются"""
        configuration = FeeConfiguration()

        threads = [
            threading.Thread(target=configuration.update, kwargs={"app_fee_rate": 0.03}),
            threading.Thread(target=configuration.update, kwargs={"withdrawal_flat_fee": 1500}),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = configuration.get()
        assert snapshot.app_fee_rate == 0.03
        assert snapshot.withdrawal_flat_fee == 1500

    def test_reset_returns_defaults_under_concurrent_updates(self):
        """reset() возвращает свой снапшот, а не чужой update"""
        configuration = FeeConfiguration()
        stop = threading.Event()
        returned = []

        def writer():
            while not stop.is_set():
                configuration.update(app_fee_rate=0.09, withdrawal_flat_fee=42)

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(300):
                returned.append(configuration.reset())
        finally:
            stop.set()
            thread.join()

        assert all(snapshot == FeeConfig() for snapshot in returned)
