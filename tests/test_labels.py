from bubblegraph.labels import InlineLabelEditor, PromptLabelEditor, accepted_label


def test_accepted_label():
    assert accepted_label(None) is None
    assert accepted_label('') is None
    assert accepted_label(' \t ') is None
    assert accepted_label('  Idea ') == 'Idea'

def test_prompt_editor_is_synchronous():
    results = []
    editor = PromptLabelEditor(lambda node_id, label: f"{label} #{node_id}")

    editor.request_edit(4, 'Old', results.append)

    assert results == ['Old #4']

def test_inline_editor_commit():
    results = []
    editor = InlineLabelEditor()

    editor.request_edit(1, 'Idea', results.append)
    assert editor.active
    assert editor.text == 'Idea'

    editor.backspace()
    editor.insert_text('a!')
    editor.commit()

    assert results == ['Idea!']
    assert not editor.active
    assert editor.node_id is None

def test_inline_editor_cancel():
    results = []
    editor = InlineLabelEditor()

    editor.request_edit(1, 'Idea', results.append)
    editor.cancel()
    editor.cancel()

    assert results == [None]

def test_new_request_cancels_open_session():
    first, second = [], []
    editor = InlineLabelEditor()

    editor.request_edit(1, 'A', first.append)
    editor.request_edit(2, 'B', second.append)

    assert first == [None]
    assert editor.node_id == 2

    editor.commit()
    assert second == ['B']

def test_idle_editor_ignores_keys():
    editor = InlineLabelEditor()

    editor.insert_text('x')
    editor.backspace()
    editor.commit()

    assert not editor.active
    assert editor.text == ''
