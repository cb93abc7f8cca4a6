from bubblegraph.core.math2d import WorldPoint
from bubblegraph.core.signal import SignalBridge, SIGNAL_DIRTY, SIGNAL_RESIZE
from bubblegraph.graph.scene import Node, Scene, default_scene
from bubblegraph.view.viewport import Viewport


def test_first_resize_centres_scene():
    scene = default_scene()
    viewport = Viewport(scene)

    viewport.resize(800, 600)

    assert scene.root.position == WorldPoint(400.0, 300.0)
    assert scene.node(2).position == WorldPoint(250.0, 450.0)
    assert scene.node(4).position == WorldPoint(400.0, 120.0)

def test_later_resizes_do_not_move_nodes():
    scene = default_scene()
    viewport = Viewport(scene)

    viewport.resize(800, 600)
    viewport.resize(1024, 768)
    viewport.resize(640, 480)

    assert scene.root.position == WorldPoint(400.0, 300.0)
    assert viewport.size == (640, 480)

def test_offset_root_is_not_centred():
    scene = Scene([Node(1, 'A', WorldPoint(10.0, 0.0))])
    viewport = Viewport(scene)

    viewport.resize(800, 600)

    assert scene.root.position == WorldPoint(10.0, 0.0)

def test_resize_requests_render():
    bridge = SignalBridge()
    viewport = Viewport(default_scene(), bridge=bridge)
    sizes, dirty = [], []
    bridge.connect(SIGNAL_RESIZE, lambda w, h: sizes.append((w, h)))
    bridge.connect(SIGNAL_DIRTY, dirty.append)

    viewport.resize(800, 600)
    viewport.resize(900, 700)

    assert sizes == [(800, 600), (900, 700)]
    assert dirty == ['resize', 'resize']
