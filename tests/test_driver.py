import math

import pytest

from chaosviz.core.chaos import systems
from chaosviz.core.chaos.base import create_attractor
from chaosviz.core.draw.config import DrawConfig
from chaosviz.core.simulation.driver import DriverState, SimulationDriver
from chaosviz.core.vector import Vector3


def test_default_driver_starts_idle_with_lorentz():
    driver = SimulationDriver()
    assert driver.state == DriverState.IDLE
    assert driver.active_model.kind == "lorentz"
    assert driver.points() == []
    assert driver.bounding_box().empty
    assert driver.speed_factor == 1.0
    assert driver.last_tick_time is None


def test_lorentz_golden_scenario():
    driver = SimulationDriver(systems.lorentz_attractor())
    t0 = 5_000.0

    first = driver.tick(t0)
    assert first == Vector3(0.01, 0.0, 0.0)
    assert driver.state == DriverState.RUNNING

    second = driver.tick(t0 + 1000.0)
    # dt = 0.0004 * 1000 * 1 = 0.4; f(0.01, 0, 0) = (-0.1, 0.28, 0)
    assert second.x == pytest.approx(-0.03, abs=1e-5)
    assert second.y == pytest.approx(0.112, abs=1e-5)
    assert second.z == pytest.approx(0.0, abs=1e-5)
    assert driver.points() == [first, second]
    assert driver.last_tick_time == t0 + 1000.0


def test_speed_factor_scales_step():
    slow = SimulationDriver(systems.rossler_attractor())
    fast = SimulationDriver(systems.rossler_attractor(), speed_factor=2.0)
    for driver in (slow, fast):
        driver.tick(0.0)
    a = slow.tick(20.0)
    b = fast.tick(10.0)
    assert a == b


def test_same_timestamp_returns_previous_point():
    driver = SimulationDriver(systems.chua_attractor())
    first = driver.tick(100.0)
    assert driver.tick(100.0) == first


def test_clock_going_backwards_is_treated_as_zero_elapsed():
    driver = SimulationDriver(systems.lu_chen_attractor())
    driver.tick(100.0)
    second = driver.tick(200.0)
    assert driver.tick(150.0) == second
    assert driver.last_tick_time == 150.0


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_tick_time_is_zero_elapsed(bad):
    driver = SimulationDriver(systems.lorentz_attractor())
    driver.tick(0.0)
    second = driver.tick(1000.0)
    assert driver.tick(bad) == second
    assert driver.last_tick_time == 1000.0
    third = driver.tick(2000.0)
    assert all(math.isfinite(c) for c in third)
    assert third == driver.active_model.next_point(second, 0.0004 * 1000.0)


def test_non_finite_first_tick_stays_idle():
    driver = SimulationDriver(systems.rossler_attractor())
    assert driver.tick(float("nan")) == driver.active_model.start
    assert driver.state == DriverState.IDLE
    assert driver.tick(50.0) == driver.active_model.start
    assert driver.last_tick_time == 50.0


def test_set_speed_factor_clamps():
    driver = SimulationDriver()
    assert driver.set_speed_factor(20) is True
    assert driver.speed_factor == 10.0
    assert driver.set_speed_factor(0.0) is True
    assert driver.speed_factor == 0.1
    assert SimulationDriver(speed_factor=50).speed_factor == 10.0


def test_set_speed_factor_notifies_only_on_change():
    seen = []
    driver = SimulationDriver(on_speed_factor_changed=seen.append)
    assert driver.set_speed_factor(1.0) is False
    assert driver.set_speed_factor(3.0) is True
    assert driver.set_speed_factor(3.0) is False
    driver.set_speed_factor(99)
    driver.set_speed_factor(10.0)
    assert seen == [3.0, 10.0]


def test_nan_speed_factor_is_ignored():
    seen = []
    driver = SimulationDriver(on_speed_factor_changed=seen.append)
    assert driver.set_speed_factor(float("nan")) is False
    assert driver.speed_factor == 1.0
    assert seen == []
    assert SimulationDriver(speed_factor=float("nan")).speed_factor == 1.0
    assert SimulationDriver(speed_factor=float("inf")).speed_factor == 10.0


def test_listeners_added_later_are_notified():
    speeds, switches = [], []
    driver = SimulationDriver(systems.lorentz_attractor())
    driver.add_speed_listener(speeds.append)
    driver.add_speed_listener(lambda value: speeds.append(-value))
    driver.add_model_listener(lambda prev, new: switches.append((prev.kind, new.kind)))

    driver.set_speed_factor(2.0)
    driver.set_speed_factor(2.0)
    assert speeds == [2.0, -2.0]

    chua = systems.chua_attractor()
    driver.set_active_model(chua)
    driver.set_active_model(chua)
    assert switches == [("lorentz", "chua")]


def test_speed_change_does_not_rewrite_history():
    driver = SimulationDriver()
    driver.tick(0.0)
    p = driver.tick(16.0)
    driver.set_speed_factor(5.0)
    assert driver.points()[-1] == p


def test_change_speed_factor_by_unit():
    driver = SimulationDriver()
    driver.change_speed_factor_by_unit(True)
    assert driver.speed_factor == pytest.approx(1.01)
    driver.change_speed_factor_by_unit(False)
    driver.change_speed_factor_by_unit(False)
    assert driver.speed_factor == pytest.approx(0.99)
    driver.set_speed_factor(0.1)
    assert driver.change_speed_factor_by_unit(False) is False


def test_switching_models_resets_buffer_to_start_point():
    seen = []
    driver = SimulationDriver(systems.lorentz_attractor(), on_model_changed=lambda prev, new: seen.append(new.kind))
    for i in range(50):
        driver.tick(i * 8.0)
    assert len(driver.points()) == 50

    rossler = systems.rossler_attractor()
    assert driver.set_active_model(rossler) is True
    assert driver.points() == [rossler.start]
    assert driver.state == DriverState.IDLE
    assert driver.bounding_box().min == rossler.start
    assert seen == ["rossler"]

    assert driver.tick(1000.0) == rossler.start
    assert len(driver.points()) == 1
    nxt = driver.tick(1008.0)
    assert nxt == rossler.next_point(rossler.start, 0.0004 * 8.0)
    assert len(driver.points()) == 2


def test_setting_the_active_model_again_is_a_noop():
    model = systems.chua_attractor()
    driver = SimulationDriver(model)
    driver.tick(0.0)
    driver.tick(10.0)
    assert driver.set_active_model(model) is False
    assert len(driver.points()) == 2
    assert driver.state == DriverState.RUNNING


def test_reset_restarts_from_start():
    driver = SimulationDriver()
    for i in range(5):
        driver.tick(i * 10.0)
    driver.reset()
    assert driver.state == DriverState.IDLE
    assert driver.points() == [driver.active_model.start]
    assert driver.tick(999.0) == driver.active_model.start


def test_buffer_follows_model_capacity():
    small = create_attractor("lorentz", draw_config=DrawConfig(max_points=3))
    driver = SimulationDriver(small)
    assert driver.buffer.capacity == 3
    for i in range(10):
        driver.tick(i * 16.0)
    assert len(driver.points()) == 3

    driver.set_active_model(systems.rossler_attractor())
    assert driver.buffer.capacity == 50000
    assert driver.draw_config().max_points == 50000
