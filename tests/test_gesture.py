import pytest
from bubblegraph.core.math2d import ScreenPoint, WorldPoint
from bubblegraph.core.signal import (
    SignalBridge, SIGNAL_DIRTY, SIGNAL_CURSOR, SIGNAL_LABEL_CHANGED,
    SIGNAL_EDIT_STARTED, SIGNAL_EDIT_FINISHED,
)
from bubblegraph.graph.scene import default_scene
from bubblegraph.input.events import (
    Cursor, EventType, pointer_down, pointer_move, pointer_up, wheel, touch,
)
from bubblegraph.input.gesture import (
    GestureController, Idle, PanningCamera, DraggingNode, Pinching,
)
from bubblegraph.labels import InlineLabelEditor, PromptLabelEditor
from bubblegraph.view.camera import Camera


class RecordingPrompt:
    """Prompt function that returns canned answers and records calls."""

    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def __call__(self, node_id, current_label):
        self.calls.append((node_id, current_label))
        return self.answer


def make_controller(answer=None, editor=None):
    bridge = SignalBridge()
    camera = Camera()
    camera.bind(bridge)
    scene = default_scene()
    prompt = RecordingPrompt(answer)
    if editor is None:
        editor = PromptLabelEditor(prompt)
    controller = GestureController(camera, scene, editor, bridge=bridge)
    return controller, camera, scene, bridge, prompt


def record(bridge, signal):
    seen = []
    bridge.connect(signal, lambda *args: seen.append(args))
    return seen


# Background point far from every bubble of the default scene
BACKGROUND = (500.0, 500.0)


def test_drag_node():
    controller, camera, scene, _, _ = make_controller()

    state = controller.handle(pointer_down(10.0, 5.0, timestamp=0.0))
    assert state == DraggingNode(1, WorldPoint(10.0, 5.0))

    controller.handle(pointer_move(110.0, 55.0))
    assert scene.node(1).position == WorldPoint(100.0, 50.0)

    assert isinstance(controller.handle(pointer_up(110.0, 55.0)), Idle)
    assert camera.offset == ScreenPoint(0.0, 0.0)

def test_drag_keeps_grab_offset_when_zoomed():
    controller, camera, scene, _, _ = make_controller()
    camera.zoom_at(ScreenPoint(0.0, 0.0), 2.0)

    # Screen (20, 0) is world (10, 0): inside the root bubble
    controller.handle(pointer_down(20.0, 0.0, timestamp=0.0))
    controller.handle(pointer_move(220.0, 100.0))

    assert scene.node(1).position == WorldPoint(100.0, 50.0)

def test_pan_is_absolute():
    controller, camera, scene, _, _ = make_controller()
    before = [n.position for n in scene.nodes]

    state = controller.handle(pointer_down(*BACKGROUND, timestamp=0.0))
    assert isinstance(state, PanningCamera)
    assert state.drag_anchor_offset == ScreenPoint(*BACKGROUND)

    controller.handle(pointer_move(520.0, 530.0))
    assert camera.offset == ScreenPoint(20.0, 30.0)

    controller.handle(pointer_move(510.0, 500.0))
    assert camera.offset == ScreenPoint(10.0, 0.0)

    controller.handle(pointer_up(510.0, 500.0))
    assert [n.position for n in scene.nodes] == before

def test_move_while_idle_does_nothing():
    controller, camera, scene, bridge, _ = make_controller()
    dirty = record(bridge, SIGNAL_DIRTY)

    controller.handle(pointer_move(10.0, 10.0))

    assert dirty == []
    assert scene.node(1).position == WorldPoint(0.0, 0.0)
    assert camera.offset == ScreenPoint(0.0, 0.0)

def test_wheel_zooms_and_prevents_default():
    controller, camera, _, _, _ = make_controller()

    event = wheel(400.0, 300.0, -100.0)
    controller.handle(event)

    assert event.prevented
    assert camera.scale == pytest.approx(1.1)
    assert camera.offset.x == pytest.approx(-40.0)
    assert camera.offset.y == pytest.approx(-30.0)

def test_wheel_during_drag_keeps_dragging():
    controller, camera, _, _, _ = make_controller()

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    state = controller.handle(wheel(0.0, 0.0, 100.0))

    assert isinstance(state, DraggingNode)
    assert camera.scale == pytest.approx(1 / 1.1)

def test_pinch_zoom_around_midpoint():
    controller, camera, _, _, _ = make_controller()

    state = controller.handle(touch(EventType.TOUCH_START, [(400.0, 400.0), (500.0, 400.0)], timestamp=0.0))
    assert state == Pinching(100.0)

    anchor = ScreenPoint(450.0, 400.0)
    world_before = camera.screen_to_world(anchor)

    event = touch(EventType.TOUCH_MOVE, [(350.0, 400.0), (550.0, 400.0)], timestamp=0.0)
    state = controller.handle(event)

    assert event.prevented
    assert state == Pinching(200.0)
    assert camera.scale == pytest.approx(2.0)
    assert camera.screen_to_world(anchor).is_close(world_before, tol=1e-6)

def test_pinch_from_zero_distance_leaves_scale():
    controller, camera, _, _, _ = make_controller()

    controller.handle(touch(EventType.TOUCH_START, [(400.0, 400.0), (400.0, 400.0)], timestamp=0.0))
    state = controller.handle(touch(EventType.TOUCH_MOVE, [(380.0, 400.0), (420.0, 400.0)], timestamp=0.0))

    assert camera.scale == 1.0
    assert state == Pinching(40.0)

def test_pointer_down_ignored_while_pinching():
    controller, _, _, _, _ = make_controller()

    controller.handle(touch(EventType.TOUCH_START, [(400.0, 400.0), (500.0, 400.0)], timestamp=0.0))
    state = controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))

    assert isinstance(state, Pinching)

def test_touch_end_returns_to_idle():
    controller, _, _, _, _ = make_controller()

    controller.handle(touch(EventType.TOUCH_START, [(400.0, 400.0), (500.0, 400.0)], timestamp=0.0))
    state = controller.handle(touch(EventType.TOUCH_END, [(400.0, 400.0)], timestamp=0.0))

    assert isinstance(state, Idle)

def test_single_touch_drags_node():
    controller, _, scene, _, _ = make_controller()

    state = controller.handle(touch(EventType.TOUCH_START, [(-150.0, 150.0)], timestamp=0.0))
    assert isinstance(state, DraggingNode)
    assert state.node_id == 2

    controller.handle(touch(EventType.TOUCH_MOVE, [(-140.0, 170.0)], timestamp=0.0))
    assert scene.node(2).position == WorldPoint(-140.0, 170.0)

def test_double_tap_edits_once():
    controller, _, scene, _, prompt = make_controller(answer='  Research  ')

    controller.handle(pointer_down(-150.0, 150.0, timestamp=1.0))
    controller.handle(pointer_up(-150.0, 150.0, timestamp=1.1))
    controller.handle(pointer_down(-150.0, 150.0, timestamp=1.25))

    assert prompt.calls == [(2, 'Market Research')]
    assert scene.node(2).label == 'Research'

def test_triple_tap_edits_twice():
    controller, _, _, _, prompt = make_controller(answer='X')

    for t in (0.0, 0.1, 0.2):
        controller.handle(pointer_down(0.0, 0.0, timestamp=t))
        controller.handle(pointer_up(0.0, 0.0, timestamp=t + 0.05))

    assert len(prompt.calls) == 2

def test_slow_taps_do_not_edit():
    controller, _, _, _, prompt = make_controller(answer='X')

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    controller.handle(pointer_up(0.0, 0.0, timestamp=0.1))
    controller.handle(pointer_down(0.0, 0.0, timestamp=0.5))

    assert prompt.calls == []

def test_presses_need_a_timestamp():
    with pytest.raises(TypeError):
        pointer_down(0.0, 0.0)
    with pytest.raises(TypeError):
        touch(EventType.TOUCH_START, [(0.0, 0.0)])

def test_presses_seconds_apart_are_two_single_taps():
    controller, _, _, _, prompt = make_controller(answer='X')

    controller.handle(pointer_down(0.0, 0.0, 10.0))
    controller.handle(pointer_up(0.0, 0.0, 10.1))
    controller.handle(pointer_down(0.0, 0.0, 25.0))

    assert prompt.calls == []

def test_double_tap_on_background_does_not_edit():
    controller, _, _, _, prompt = make_controller(answer='X')

    controller.handle(pointer_down(*BACKGROUND, timestamp=0.0))
    controller.handle(pointer_up(*BACKGROUND, timestamp=0.05))
    controller.handle(pointer_down(*BACKGROUND, timestamp=0.1))

    assert prompt.calls == []

@pytest.mark.parametrize('answer', [None, '', '   '])
def test_cancel_or_blank_keeps_label(answer):
    controller, _, scene, bridge, _ = make_controller(answer=answer)
    changed = record(bridge, SIGNAL_LABEL_CHANGED)

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    controller.handle(pointer_up(0.0, 0.0, timestamp=0.05))
    controller.handle(pointer_down(0.0, 0.0, timestamp=0.1))

    assert scene.node(1).label == 'My Big Idea'
    assert changed == []

def test_inline_editor_applies_later():
    editor = InlineLabelEditor()
    controller, _, scene, bridge, _ = make_controller(editor=editor)
    started = record(bridge, SIGNAL_EDIT_STARTED)
    finished = record(bridge, SIGNAL_EDIT_FINISHED)
    dirty = record(bridge, SIGNAL_DIRTY)

    controller.handle(pointer_down(150.0, 150.0, timestamp=0.0))
    controller.handle(pointer_up(150.0, 150.0, timestamp=0.05))
    controller.handle(pointer_down(150.0, 150.0, timestamp=0.1))
    controller.handle(pointer_up(150.0, 150.0, timestamp=0.15))

    assert started == [(3, 'UI/UX Design')]
    assert editor.active and editor.node_id == 3
    assert scene.node(3).label == 'UI/UX Design'

    dirty.clear()
    editor.insert_text(' v2')
    editor.commit()

    assert scene.node(3).label == 'UI/UX Design v2'
    assert finished == [(3, 'UI/UX Design v2')]
    assert dirty == [('label',)]

def test_one_dirty_per_event():
    controller, _, _, bridge, _ = make_controller()
    dirty = record(bridge, SIGNAL_DIRTY)

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    controller.handle(pointer_move(5.0, 5.0))
    controller.handle(pointer_move(9.0, 2.0))
    assert len(dirty) == 2

    dirty.clear()
    controller.handle(wheel(0.0, 0.0, -1.0))
    assert dirty == [('zoom',)]

def test_double_tap_with_sync_editor_renders_once():
    controller, _, _, bridge, _ = make_controller(answer='New')
    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    controller.handle(pointer_up(0.0, 0.0, timestamp=0.05))

    dirty = record(bridge, SIGNAL_DIRTY)
    controller.handle(pointer_down(0.0, 0.0, timestamp=0.1))

    assert dirty == [('label',)]

def test_cursor_feedback():
    controller, _, _, bridge, _ = make_controller()
    cursors = record(bridge, SIGNAL_CURSOR)

    assert controller.cursor == Cursor.GRAB
    controller.handle(pointer_down(*BACKGROUND, timestamp=0.0))
    assert controller.cursor == Cursor.GRABBING
    controller.handle(pointer_up(*BACKGROUND))
    assert controller.cursor == Cursor.GRAB

    assert cursors == [(Cursor.GRABBING,), (Cursor.GRAB,)]

def test_cancel_drops_gesture():
    controller, _, _, _, _ = make_controller()

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    assert isinstance(controller.cancel(), Idle)
    assert controller.cursor == Cursor.GRAB

def test_grab_off_centre_and_move():
    controller, _, scene, _, _ = make_controller()

    state = controller.handle(pointer_down(30.0, 40.0, timestamp=0.0))
    assert state == DraggingNode(1, WorldPoint(30.0, 40.0))

    controller.handle(pointer_move(40.0, 40.0))
    assert scene.node(1).position == WorldPoint(10.0, 0.0)

def test_drag_distance_divided_by_scale():
    controller, camera, scene, _, _ = make_controller()
    camera.zoom_at(ScreenPoint(0.0, 0.0), 2.5)

    controller.handle(pointer_down(0.0, 0.0, timestamp=0.0))
    controller.handle(pointer_move(50.0, -25.0))

    assert scene.node(1).position.is_close(WorldPoint(20.0, -10.0))
