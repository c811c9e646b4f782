"""CLI for audio collection, MFCC extraction and emotion classification."""

import argparse
import logging
import sys
from pathlib import Path

from voice_emotion.audio import AudioCollector
from voice_emotion.audio.config import AudioConfig
from voice_emotion.features import MfccExtractor
from voice_emotion.postprocess import EmotionPrediction, format_prediction


def _read_labels(path: Path) -> list:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Record audio (mono 22.05 kHz) and extract MFCC features for emotion recognition"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=3.0,
        help="Recording duration in seconds (default: 3)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("recording.wav"),
        help="Output WAV file path",
    )
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        default=None,
        help="Use an existing WAV file instead of recording",
    )
    parser.add_argument(
        "--device",
        type=int,
        default=None,
        help="Input device index (list with --list-devices)",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices and exit",
    )
    parser.add_argument(
        "--extract-features",
        action="store_true",
        help="Extract and print the fixed-shape MFCC matrix",
    )
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="TorchScript classifier to run on the most recent window",
    )
    parser.add_argument(
        "--labels",
        type=Path,
        default=None,
        help="Text file with one class label per line",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    if args.list_devices:
        try:
            import sounddevice as sd
            print(sd.query_devices())
        except ImportError:
            print("sounddevice not installed: pip install sounddevice", file=sys.stderr)
            sys.exit(1)
        return

    config = AudioConfig()
    collector = AudioCollector(config)

    if args.input is not None:
        if not args.input.exists():
            print(f"File not found: {args.input}", file=sys.stderr)
            sys.exit(1)
        wav_path = args.input
    else:
        print(f"Recording {args.duration}s to {args.output} (mono {config.sample_rate} Hz)...")
        collector.record_to_file(str(args.output), args.duration, args.device)
        print(f"Saved: {args.output}")
        wav_path = args.output

    if not (args.extract_features or args.model):
        return

    audio = collector.load_wav(str(wav_path))
    if len(audio) < config.required_samples:
        print(
            f"Note: {len(audio)} samples < {config.required_samples}; "
            "features will be left-padded with zeros"
        )
    window = audio[-config.required_samples :]
    extractor = MfccExtractor(config)

    if args.extract_features:
        mfcc = extractor.compute(window)
        features = extractor.extract(window)
        print(f"Computed {mfcc.shape[1]} frames x {mfcc.shape[0]} MFCCs")
        print(f"Model input: {features.shape[0]} x {features.shape[1]}")
        print(f"Last frame (first 5 coefficients): {features[:5, -1]}")

    if args.model:
        from voice_emotion.models import load_torchscript_model

        model_forward, num_classes = load_torchscript_model(args.model, config)
        labels = _read_labels(args.labels) if args.labels else None
        if labels is not None and len(labels) != num_classes:
            print(
                f"Warning: {len(labels)} labels for {num_classes} model classes",
                file=sys.stderr,
            )
        output = model_forward(extractor.extract_model_input(window))
        print(format_prediction(EmotionPrediction.from_output(output, labels)))


if __name__ == "__main__":
    main()
