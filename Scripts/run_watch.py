import argparse
import dataclasses
import logging
from pathlib import Path

import cv2
from tqdm import tqdm

from Object_Watch import TargetWatcher, WatchProfile, load_watch_profile, write_result_json
from tinyyolo_kit import PreprocessConfig, load_pipeline


def _build_profile(args: argparse.Namespace) -> WatchProfile:
    profile = load_watch_profile(Path(args.profile)) if args.profile else WatchProfile()
    overrides = {}
    if args.label is not None:
        overrides["label"] = args.label
    if args.conf is not None:
        overrides["confidence"] = args.conf
    if args.labels is not None:
        overrides["labels_path"] = args.labels
    if args.debug:
        overrides["debug"] = True
    if args.strict:
        overrides["strict"] = True
    return dataclasses.replace(profile, **overrides) if overrides else profile


def main() -> int:
    parser = argparse.ArgumentParser(description="Run Tiny YOLOv2 and report where a target label is seen.")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--image", default=None, help="Path to an input image.")
    src.add_argument("--video", default=None, help="Path to an input video file.")
    src.add_argument("--webcam", type=int, default=None, help="Webcam index (e.g., 0).")
    parser.add_argument("--model", default="Models/tinyyolov2-8.onnx", help="Path to the Tiny YOLOv2 ONNX model.")
    parser.add_argument("--profile", default=None, help="Watch profile JSON (label, confidence, debug, ...).")
    parser.add_argument("--label", default=None, help="Target label (overrides the profile).")
    parser.add_argument("--conf", type=float, default=None, help="Confidence threshold (overrides the profile).")
    parser.add_argument("--labels", default=None, help="Class metadata file with a `names:` block.")
    parser.add_argument("--debug", action="store_true", help="Draw matched boxes on the output image.")
    parser.add_argument("--strict", action="store_true", help="Drop detections with NaN/Inf values.")
    parser.add_argument("--normalize", action="store_true", help="Scale input pixels to [0, 1].")
    parser.add_argument(
        "--onnx-providers",
        default=None,
        help='Comma-separated ORT providers, e.g. "CUDAExecutionProvider,CPUExecutionProvider".',
    )
    parser.add_argument("--out", default=None, help="Optional output path (image or video) for the resized frames.")
    parser.add_argument("--json", default=None, help="Optional path for the JSON result (image) or a directory (video).")
    parser.add_argument("--every", type=int, default=1, help="Process every Nth frame for video/webcam.")
    parser.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = no limit).")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.every < 1:
        raise ValueError("--every must be >= 1")
    if args.max_frames < 0:
        raise ValueError("--max-frames must be >= 0")

    profile = _build_profile(args)
    watcher = TargetWatcher(profile)

    onnx_providers = None
    if args.onnx_providers:
        onnx_providers = [p.strip() for p in str(args.onnx_providers).split(",") if p.strip()]

    pipeline = load_pipeline(
        model_path=args.model,
        preprocess_cfg=PreprocessConfig(normalize=bool(args.normalize)),
        onnx_providers=onnx_providers,
    )

    if args.image is not None:
        img = cv2.imread(args.image)
        if img is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")

        prep, grid = pipeline.run(img)
        result = watcher.process(grid)
        vis = watcher.annotate(prep.resized, result)
        if args.out:
            ok = cv2.imwrite(args.out, vis)
            if not ok:
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.json:
            write_result_json(Path(args.json), result)

        for det in result.detections:
            print(det.label, f"{det.confidence:.3f}", det.as_xyxy())
        print(f"{profile.label}: {'seen' if result.seen else 'not seen'} ({len(result.markers)} match(es))")
        return 0

    if args.video is not None:
        cap = cv2.VideoCapture(args.video)
        if not cap.isOpened():
            raise FileNotFoundError(f"Could not open video: {args.video}")
    else:
        cap = cv2.VideoCapture(int(args.webcam))
        if not cap.isOpened():
            raise RuntimeError(f"Could not open webcam index: {args.webcam}")

    total = int(cap.get(cv2.CAP_PROP_FRAME_COUNT)) if args.video is not None else 0
    writer = None
    frame_idx = 0
    processed = 0
    frames_seen = 0
    json_dir = Path(args.json) if args.json else None

    try:
        with tqdm(total=total or None, unit="frame") as bar:
            while True:
                ok, frame = cap.read()
                if not ok or frame is None:
                    break

                frame_idx += 1
                bar.update(1)
                if (frame_idx - 1) % args.every != 0:
                    continue

                prep, grid = pipeline.run(frame)
                result = watcher.process(grid)
                if result.seen:
                    frames_seen += 1
                if json_dir is not None:
                    write_result_json(json_dir / f"frame_{frame_idx:06d}.json", result, frame_idx=frame_idx)

                if args.out:
                    vis = watcher.annotate(prep.resized, result)
                    if writer is None:
                        fps = cap.get(cv2.CAP_PROP_FPS)
                        if fps is None or fps <= 0:
                            fps = 30.0
                        h, w = vis.shape[:2]
                        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
                        writer = cv2.VideoWriter(args.out, fourcc, fps / args.every, (w, h))
                        if not writer.isOpened():
                            raise RuntimeError(f"Failed to open video writer: {args.out}")
                    writer.write(vis)

                processed += 1
                if args.max_frames and processed >= args.max_frames:
                    break
    finally:
        cap.release()
        if writer is not None:
            writer.release()

    print(f"frames_processed={processed} frames_with_{profile.label}={frames_seen}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
