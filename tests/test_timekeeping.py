from simlab.core.timekeeping import Countdown, FrameTimer


def test_frame_timer_caps_long_frames():
    timer = FrameTimer(max_dt=0.1, last_time=0.0)
    # perf_counter is far past 0.0, so this tick is one huge frame
    assert timer.tick() == 0.1
    assert 0.0 <= timer.tick() < 0.1


def test_countdown_fires_once():
    countdown = Countdown()
    assert not countdown.active
    assert not countdown.advance(1.0)
    countdown.start(2.0)
    assert countdown.active
    assert not countdown.advance(1.0)
    assert countdown.advance(1.5)
    assert not countdown.active
    assert not countdown.advance(1.0)
