"""Shared pytest setup: headless Qt and isolated QSettings."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication, QSettings

from clipforge.models.clip import Clip
from clipforge.models.video import Video


@pytest.fixture(autouse=True, scope="session")
def _isolated_settings(tmp_path_factory):
    QCoreApplication.setOrganizationName("ClipForgeTests")
    QCoreApplication.setApplicationName("ClipForgeTests")
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)
    QSettings.setPath(
        QSettings.Format.IniFormat,
        QSettings.Scope.UserScope,
        str(tmp_path_factory.mktemp("settings")),
    )
    yield


@pytest.fixture
def video_a():
    return Video(id="video_1", name="a.mp4", path="media/a.mp4", size=1000)


@pytest.fixture
def video_b():
    return Video(id="video_2", name="b.mp4", path="/abs/b.mp4", size=2000)


@pytest.fixture
def three_clips():
    """Three 10 s clips of one video at 0 / 10 / 20 s."""
    return [
        Clip("clip_1", "video_1", 0, 10_000, 0),
        Clip("clip_2", "video_1", 10_000, 20_000, 10_000),
        Clip("clip_3", "video_1", 20_000, 30_000, 20_000),
    ]
