"""Run the streaming emotion pipeline with a TorchScript or dummy model.

Usage:
  python pipeline_test.py                       # TorchScript model, synthetic tone
  python pipeline_test.py --dummy               # Dummy model, synthetic tone
  python pipeline_test.py --file test.wav       # TorchScript model, audio from file
  python pipeline_test.py --file test.wav --labels labels.txt
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import numpy as np

from voice_emotion.audio.config import AudioConfig
from voice_emotion.pipeline import StreamingConfig, StreamingEmotionPipeline
from voice_emotion.postprocess import format_prediction

# Path to TorchScript model
MODEL_PATH = Path(__file__).resolve().parent / "models" / "ser_cpu_rnn_model.pt"


def make_dummy_model(num_classes=26):
    """Dummy model: MFCC (1, 40, 174) -> probabilities biased by mean energy."""

    def forward(features):
        logits = np.linspace(-1.0, 1.0, num_classes) * float(features[0, 0].mean()) / 100.0
        exp = np.exp(logits - logits.max())
        return (exp / exp.sum())[np.newaxis, :]

    return forward


def synthetic_chunks(config, seconds=5.0, freq=440.0):
    """A pure tone delivered in capture-sized blocks."""
    t = np.arange(int(seconds * config.sample_rate)) / config.sample_rate
    audio = 0.5 * np.sin(2 * np.pi * freq * t)
    block = config.capture_block_size
    for i in range(0, len(audio), block):
        yield audio[i : i + block]


def main(use_model=True, wav_path=None, labels_path=None):
    audio_config = AudioConfig()

    if use_model and MODEL_PATH.exists():
        from voice_emotion.models import load_torchscript_model

        print(f"Loading TorchScript model from {MODEL_PATH}...")
        model_forward, num_classes = load_torchscript_model(MODEL_PATH, audio_config)
        model_name = "TorchScript"
    else:
        if use_model:
            print(f"Model not found at {MODEL_PATH}, using dummy model.")
        model_forward = make_dummy_model(audio_config.num_classes)
        model_name = "dummy"

    labels = None
    if labels_path:
        labels = [l.strip() for l in Path(labels_path).read_text(encoding="utf-8").splitlines() if l.strip()]

    def on_prediction(p):
        print(format_prediction(p, k=6))
        print()

    pipeline = StreamingEmotionPipeline(
        config=StreamingConfig(update_interval_sec=1.6, sample_rate=audio_config.sample_rate),
        audio_config=audio_config,
        model_forward=model_forward,
        labels=labels,
        on_prediction=on_prediction,
    )

    if wav_path:
        wav_path = Path(wav_path)
        if not wav_path.exists():
            print(f"File not found: {wav_path}")
            sys.exit(1)
        print(f"Running pipeline with {model_name} model (file audio)...\n")
        pipeline.run_from_file(str(wav_path))
    else:
        print(f"Running pipeline with {model_name} model (synthetic audio)...\n")
        pipeline.run(iter(synthetic_chunks(audio_config)))
    print("Done.")


if __name__ == "__main__":
    args = sys.argv[1:]
    use_model = "--dummy" not in args
    wav_path = None
    labels_path = None
    if "--file" in args:
        idx = args.index("--file")
        if idx + 1 < len(args):
            wav_path = args[idx + 1]
    if "--labels" in args:
        idx = args.index("--labels")
        if idx + 1 < len(args):
            labels_path = args[idx + 1]
    main(use_model=use_model, wav_path=wav_path, labels_path=labels_path)
