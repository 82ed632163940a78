import pytest

from openflowsim.sim import ServiceQueue, SignalBus, Simulation


def test_events_run_in_time_order():
    sim = Simulation()
    seen = []
    sim.schedule(2.0, lambda: seen.append(("b", sim.now)))
    sim.schedule(1.0, lambda: seen.append(("a", sim.now)))
    sim.run()
    assert seen == [("a", 1.0), ("b", 2.0)]


def test_equal_times_keep_scheduling_order():
    sim = Simulation()
    seen = []
    for name in "xyz":
        sim.schedule(1.0, lambda name=name: seen.append(name))
    sim.run()
    assert seen == ["x", "y", "z"]


def test_run_until_stops_and_keeps_later_events():
    sim = Simulation()
    seen = []
    sim.schedule(1.0, lambda: seen.append(1))
    sim.schedule(5.0, lambda: seen.append(5))
    assert sim.run(until=3.0) == 3.0
    assert seen == [1]
    assert sim.pending == 1
    sim.run()
    assert seen == [1, 5]


def test_negative_delay_rejected():
    sim = Simulation()
    with pytest.raises(ValueError):
        sim.schedule(-1.0, lambda: None)


def test_events_scheduled_from_callbacks_are_relative_to_now():
    sim = Simulation()
    times = []
    sim.schedule(1.0, lambda: sim.schedule(1.0, lambda: times.append(sim.now)))
    sim.run()
    assert times == [2.0]


def test_signal_bus_calls_listeners_in_order():
    bus = SignalBus()
    seen = []
    bus.subscribe("sig", lambda v: seen.append(("first", v)))
    bus.subscribe("sig", lambda v: seen.append(("second", v)))
    bus.subscribe("other", lambda v: seen.append(("other", v)))
    bus.emit("sig", 7)
    assert seen == [("first", 7), ("second", 7)]


def test_signal_without_listeners_does_nothing():
    bus = SignalBus()
    seen = []
    bus.subscribe("a", seen.append)
    bus.emit("b", 1)
    assert seen == []


def test_service_queue_serves_one_at_a_time():
    sim = Simulation()
    service_time = 0.5
    served = []
    queue = ServiceQueue(sim, service_time, lambda m: served.append((m, sim.now)))
    for message in ("m1", "m2", "m3"):
        queue.submit(message)
    assert len(queue) == 2
    assert queue.busy
    sim.run()
    assert served == [
        ("m1", service_time),
        ("m2", 2 * service_time),
        ("m3", 3 * service_time),
    ]
    assert len(queue) == 0
    assert not queue.busy


def test_service_queue_waiting_times_and_hook():
    sim = Simulation()
    service_time = 0.5
    waits = []
    sizes = []
    queue = ServiceQueue(sim, service_time, lambda m: waits.append(queue.last_waiting_time))
    queue.on_served = lambda: sizes.append(len(queue))
    queue.submit("a")
    queue.submit("b")
    sim.run()
    assert waits == [0.0, service_time]
    assert sizes == [0, 0]


def test_service_queue_idle_after_drain_accepts_new_work():
    sim = Simulation()
    served = []
    queue = ServiceQueue(sim, 1.0, served.append)
    queue.submit("first")
    sim.run()
    queue.submit("second")
    assert queue.busy
    sim.run()
    assert served == ["first", "second"]