"""Tests for the label editor model."""

import cv2
import numpy as np
import pytest
from coindet.editor import (DEFAULT_RADIUS, MOVE, RESIZE, LabelEditor, LabelSession,
                            labels_path_for)
from coindet.geometry.circle import Circle
from coindet.utils.io_handler import load_labels, save_labels


class TestLabelSession:
    """Test editing operations."""

    def test_initial_selection(self):
        """The first circle starts selected."""
        assert LabelSession([Circle(0, 0, 5)]).active == 0
        assert LabelSession().active == -1

    def test_hit_test_prefers_centers(self):
        """A center hit beats a rim hit on another circle."""
        session = LabelSession([Circle(100, 100, 5), Circle(60, 100, 40)])
        assert session.hit_test(102, 100) == 0
        assert session.hit_test(20, 100) == 1
        assert session.hit_test(300, 300) == -1

    def test_hit_test_newest_first(self):
        """Overlapping centers resolve to the newest circle."""
        session = LabelSession([Circle(50, 50, 20), Circle(52, 50, 20)])
        assert session.hit_test(51, 50) == 1

    def test_move(self):
        """Dragging a center moves the circle."""
        session = LabelSession([Circle(50, 50, 20)])
        session.press(50, 50)
        assert session.mode == MOVE
        session.drag(80, 90)
        session.release()
        assert session.circles[0] == Circle(80, 90, 20)
        assert session.mode is None
        assert session.dirty

    def test_resize(self):
        """Dragging the rim changes the radius."""
        session = LabelSession([Circle(50, 50, 20)])
        session.press(70, 50)
        assert session.mode == RESIZE
        session.drag(80, 50)
        assert session.circles[0].radius == pytest.approx(30.0)

    def test_resize_minimum_radius(self):
        """Radius never drops below one pixel."""
        session = LabelSession([Circle(50, 50, 20)], hit_tolerance=5)
        session.press(70, 50)
        session.drag(50, 50)
        assert session.circles[0].radius == 1.0

    def test_press_on_empty_space(self):
        """Clicking nothing deselects and dragging is ignored."""
        session = LabelSession([Circle(50, 50, 20)])
        session.press(300, 300)
        session.drag(10, 10)
        assert session.active == -1
        assert session.circles == [Circle(50, 50, 20)]

    def test_add(self):
        """New circles use the default radius and become active."""
        session = LabelSession([Circle(0, 0, 5)])
        session.add(30, 40)
        assert session.circles[-1] == Circle(30, 40, DEFAULT_RADIUS)
        assert session.active == 1

    def test_delete(self):
        """Deleting clamps the selection."""
        session = LabelSession([Circle(0, 0, 5), Circle(20, 0, 5)])
        session.active = 1
        assert session.delete_active()
        assert session.active == 0
        assert session.delete_active()
        assert session.active == -1
        assert not session.delete_active()

    def test_save(self, tmp_path):
        """Saving writes the label file and clears the dirty flag."""
        path = tmp_path / 'img_labels.txt'
        session = LabelSession([], path)
        session.add(10, 20, 5)
        assert session.save() == path
        assert load_labels(path) == [Circle(10, 20, 5)]
        assert not session.dirty

    def test_save_without_path(self):
        """A session without a file cannot save."""
        with pytest.raises(ValueError):
            LabelSession().save()

    def test_render(self):
        """Rendering returns a color copy."""
        session = LabelSession([Circle(30, 30, 10), Circle(60, 60, 0)])
        session.set_detections([Circle(30, 30, 12)])
        image = np.zeros((100, 100), dtype=np.uint8)
        output = session.render(image)
        assert output.shape == (100, 100, 3)
        assert image.max() == 0


class TestLabelEditor:
    """Test editor setup and key handling without opening a window."""

    def test_labels_path_for(self, tmp_path):
        """Labels default to <stem>_labels.txt."""
        assert labels_path_for(tmp_path / 'coin.jpg') == tmp_path / 'coin_labels.txt'

    def test_loads_existing_labels(self, tmp_path, coin_image, coins):
        """Existing label files are opened for editing."""
        image_path = tmp_path / 'coin.png'
        cv2.imwrite(str(image_path), coin_image)
        save_labels(labels_path_for(image_path), coins)

        editor = LabelEditor(image_path)
        assert editor.session.circles == coins

    def test_missing_image(self, tmp_path):
        """Unreadable images are rejected."""
        with pytest.raises(ValueError):
            LabelEditor(tmp_path / 'missing.png')

    def test_keys(self, tmp_path, coin_image):
        """Keys delete, save, detect and quit."""
        image_path = tmp_path / 'coin.png'
        cv2.imwrite(str(image_path), coin_image)
        editor = LabelEditor(image_path, tmp_path / 'out.txt')
        editor.session.add(10, 10)

        assert editor.handle_key(ord('r'))
        assert len(editor.session.detections) >= 3
        assert editor.handle_key(ord('s'))
        assert load_labels(tmp_path / 'out.txt') == [Circle(10, 10, DEFAULT_RADIUS)]
        assert editor.handle_key(ord('d'))
        assert editor.session.circles == []
        assert not editor.handle_key(ord('q'))
        assert not editor.handle_key(27)
