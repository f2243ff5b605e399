"""ClipForge entry point: edit and export the project from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QThread

from clipforge.infrastructure.ffmpeg_runner import get_ffmpeg_runner
from clipforge.models.export_preset import QUALITY_PRESETS
from clipforge.services.media_import import get_video_data
from clipforge.services.project_store import ProjectStore
from clipforge.services.settings_manager import SettingsManager
from clipforge.services.time_mapper import total_duration_ms
from clipforge.services.timeline_model import TimelineModel
from clipforge.services.video_probe import probe_duration_ms
from clipforge.utils.config import APP_NAME, ORG_NAME
from clipforge.utils.time_utils import ms_to_display, seconds_to_ms
from clipforge.workers.export_worker import ExportWorker

logger = logging.getLogger("clipforge")


def _build_parser(settings: SettingsManager) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clipforge", description="Timeline video editor")
    parser.add_argument("--project", type=Path, default=settings.get_project_dir(),
                        help="Project directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Copy videos into the project and append them")
    p_import.add_argument("files", nargs="+", type=Path)

    sub.add_parser("list", help="Show videos and clips")

    p_split = sub.add_parser("split", help="Split the clip under a timeline position")
    p_split.add_argument("seconds", type=float)

    p_delete = sub.add_parser("delete", help="Ripple-delete a clip")
    p_delete.add_argument("clip_id")

    sub.add_parser("glue", help="Close all gaps between clips")

    p_remove = sub.add_parser("remove-video", help="Remove a video and its clips")
    p_remove.add_argument("video_id")

    p_export = sub.add_parser("export", help="Render the timeline to a file")
    p_export.add_argument("output", type=Path)
    p_export.add_argument("--quality", choices=sorted(QUALITY_PRESETS),
                          default=settings.get_export_quality())
    return parser


def _import(model: TimelineModel, store: ProjectStore, files: list[Path]) -> None:
    for info in get_video_data(files):
        rel_path = store.import_video(info.path)
        [video] = model.add_videos([replace(info, path=rel_path)])
        duration_ms = probe_duration_ms(store.resolve_media_path(rel_path))
        if duration_ms <= 0:
            logger.warning("Could not read duration of %s; no clip created", info.name)
            continue
        model.create_initial_clip(video, duration_ms)


def _list(model: TimelineModel) -> None:
    for video in model.videos:
        print(f"{video.id}\t{video.name}\t{video.size} bytes")
    for clip in model.clips:
        video = model.video_for(clip)
        print(
            f"{clip.id}\t{video.name if video else '(missing video)'}\t"
            f"@{ms_to_display(clip.timeline_start_ms)}\t"
            f"[{clip.source_start_ms}ms, {clip.source_end_ms}ms)"
        )
    print(f"Total: {ms_to_display(total_duration_ms(model.clips))}")


def _export(app: QCoreApplication, model: TimelineModel, store: ProjectStore,
            output: Path, quality: str) -> int:
    if not get_ffmpeg_runner().is_available():
        print("FFmpeg not found. Install it or set a custom path.", file=sys.stderr)
        return 1
    clips, videos = model.snapshot()
    thread = QThread()
    worker = ExportWorker(clips, videos, output, quality, resolve_path=store.resolve_media_path)
    worker.moveToThread(thread)
    status = {"code": 1}

    def _on_finished(path: str) -> None:
        print(f"Exported to {path}")
        status["code"] = 0
        thread.quit()

    def _on_error(message: str) -> None:
        print(f"Export failed: {message}", file=sys.stderr)
        thread.quit()

    worker.progress.connect(lambda pct, stage: print(f"{pct:3d}% {stage}"))
    worker.finished.connect(_on_finished)
    worker.error.connect(_on_error)
    thread.started.connect(worker.run)
    thread.finished.connect(app.quit)
    thread.start()
    app.exec()
    thread.wait()
    return status["code"]


def main(argv: list[str] | None = None) -> int:
    QCoreApplication.setOrganizationName(ORG_NAME)
    QCoreApplication.setApplicationName(APP_NAME)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    settings = SettingsManager()
    args = _build_parser(settings).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    store = ProjectStore(args.project)
    model = TimelineModel(store.init())

    if args.command == "export":
        return _export(app, model, store, args.output, args.quality)

    if args.command == "import":
        _import(model, store, args.files)
    elif args.command == "list":
        _list(model)
        return 0
    elif args.command == "split":
        if model.split_at(seconds_to_ms(args.seconds)) is None:
            print("Nothing to split at that position", file=sys.stderr)
            return 1
    elif args.command == "delete":
        if model.delete_clip(args.clip_id) is None:
            print(f"Unknown clip {args.clip_id}", file=sys.stderr)
            return 1
    elif args.command == "glue":
        model.glue_clips()
    elif args.command == "remove-video":
        model.remove_video(args.video_id)

    store.save(model.project)
    _list(model)
    return 0


if __name__ == "__main__":
    sys.exit(main())
