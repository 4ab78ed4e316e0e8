import pytest

from core.fly_to import FlyToAnimator
from core.orientation import GlobeState, InteractionPhase
from core.scheduler import FrameScheduler
from core.types import PointOfInterest, Viewport


NYC = PointOfInterest("New York", 40.0, -74.0)


def _run(sched, start, stop, step=16.0):
    t = start
    while t <= stop:
        sched.run(t)
        t += step


@pytest.fixture
def rig(settings):
    sched = FrameScheduler()
    state = GlobeState()
    state.reset((0.0, -30.0, 0.0), 350.0, 0.05)
    return sched, state, FlyToAnimator(sched, settings)


def test_fly_to_lands_exactly_on_target(rig):
    sched, state, anim = rig
    anim.start(state, NYC, 0.05)
    assert state.phase is InteractionPhase.ANIMATING
    assert (state.velocity_yaw, state.velocity_pitch) == (0.0, 0.0)

    _run(sched, 1000.0, 1000.0 + 1600.0)
    assert state.rotation_tuple() == (74.0, -40.0, 0.0)
    assert state.phase is InteractionPhase.IDLE_DRIFTING
    assert state.velocity_yaw == 0.05
    assert not anim.active


def test_duration_is_wall_clock(rig):
    sched, state, anim = rig
    anim.start(state, NYC, 0.05)
    sched.run(0.0)
    sched.run(750.0)
    assert anim.active
    sched.run(1500.0)
    assert not anim.active
    assert state.rotation_tuple() == (74.0, -40.0, 0.0)


def test_progress_is_eased_out(rig):
    sched, state, anim = rig
    anim.start(state, NYC, 0.05)
    sched.run(0.0)
    sched.run(750.0)
    # ease-out cubic at 0.5 is 0.875
    assert state.rotation[0] == pytest.approx(74.0 * 0.875)
    assert state.rotation[1] == pytest.approx(-30.0 + (-10.0) * 0.875)


def test_second_fly_to_is_idempotent(rig):
    sched, state, anim = rig
    anim.start(state, NYC, 0.05)
    _run(sched, 0.0, 1600.0)
    anim.start(state, NYC, 0.05)
    _run(sched, 2000.0, 3600.0)
    assert state.rotation_tuple() == (74.0, -40.0, 0.0)


def test_restart_mid_flight_starts_from_current_rotation(rig):
    sched, state, anim = rig
    other = PointOfInterest("Tokyo", 35.7, 139.7)
    anim.start(state, NYC, 0.05)
    sched.run(0.0)
    sched.run(500.0)
    mid = state.rotation_tuple()
    anim.start(state, other, 0.05)
    assert anim._start == mid
    assert len(sched) == 1
    _run(sched, 600.0, 2200.0)
    assert state.rotation_tuple() == (-139.7, -35.7, 0.0)


def test_cancel_leaves_rotation_and_returns_to_idle(rig):
    sched, state, anim = rig
    anim.start(state, NYC, 0.05)
    sched.run(0.0)
    sched.run(300.0)
    mid = state.rotation_tuple()
    anim.cancel()
    assert state.phase is InteractionPhase.IDLE_DRIFTING
    sched.run(400.0)
    assert state.rotation_tuple() == mid
    assert len(sched) == 0


def test_zoom_and_fly_scenario(make_engine, earth, settings):
    engine = make_engine(earth)
    engine.mount(Viewport(800, 600))
    engine.set_zoom_percent(50)
    assert engine.state.target_scale == pytest.approx(1050.0)
    engine.fly_to(NYC)
    t = 0.0
    while engine.animator.active:
        engine.frame(t)
        t += 16.0
    assert t > 1500.0
    assert engine.rotation == (74.0, -40.0, 0.0)
    assert engine.state.velocity_yaw == settings.idle_yaw_velocity
    engine.unmount()
