"""End-to-end streaming loop: audio -> ring buffer -> MFCC -> model -> prediction.

Glue that wires existing components with minimal deps. Model is a callable
(model_forward) so you can plug PyTorch / ONNX / TFLite.

Streaming: the most recent required_samples (about 2 s at 22.05 kHz) are
classified every 1.6 s of new audio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

import numpy as np

from voice_emotion.audio import AudioCollector, SampleRingBuffer, to_mono
from voice_emotion.audio.config import AudioConfig
from voice_emotion.features import MfccExtractor
from voice_emotion.postprocess import EmotionPrediction, default_labels

logger = logging.getLogger(__name__)


@dataclass
class StreamingConfig:
    """Streaming inference parameters."""

    update_interval_sec: float = 1.6
    chunk_duration_sec: Optional[float] = None
    sample_rate: int = 22_050

    @property
    def update_samples(self) -> int:
        """New samples between two inference runs."""
        return max(1, int(self.update_interval_sec * self.sample_rate))


# Model forward: accepts MFCC tensor (1, n_mfcc, target_frames), returns (C,) or (1, C)
ModelForward = Callable[[np.ndarray], np.ndarray]
PredictionCallback = Callable[[EmotionPrediction], None]


class StreamingEmotionPipeline:
    """Runs the full pipeline in a loop: audio -> MFCC -> model -> prediction.

    Components are injected so you can use real or mock audio, and any
    classifier via a callable.

    Interface:
      pipeline = StreamingEmotionPipeline(
          config=StreamingConfig(),
          extractor=MfccExtractor(),
          model_forward=my_model_fn,
          labels=["neutral", "happy", ...],
          on_prediction=print,
      )
      pipeline.run()  # blocks; use stop() from another thread or pass a finite audio_iterator
    """

    def __init__(
        self,
        config: Optional[StreamingConfig] = None,
        audio_config: Optional[AudioConfig] = None,
        extractor: Optional[MfccExtractor] = None,
        model_forward: Optional[ModelForward] = None,
        labels: Optional[Sequence[str]] = None,
        on_prediction: Optional[PredictionCallback] = None,
        audio_collector: Optional[AudioCollector] = None,
    ):
        self.audio_config = audio_config or AudioConfig()
        self.streaming_config = config or StreamingConfig(sample_rate=self.audio_config.sample_rate)
        self.extractor = extractor or MfccExtractor(self.audio_config)
        self.model_forward = model_forward
        self.labels = list(labels) if labels is not None else default_labels(self.audio_config.num_classes)
        self.on_prediction = on_prediction or (lambda p: None)
        self.audio_collector = audio_collector or AudioCollector(self.audio_config)

        self.ring = SampleRingBuffer(self.audio_config.ring_capacity)
        self.last_prediction: Optional[EmotionPrediction] = None
        self._since_update = 0
        self._stopped = False

    def stop(self) -> None:
        """Signal the run loop to exit (checked each iteration)."""
        self._stopped = True

    def push(self, chunk: np.ndarray) -> None:
        """Append captured samples to the ring buffer."""
        samples = to_mono(chunk)
        if samples.size == 0:
            logger.warning("Dropping empty audio chunk")
            return
        self.ring.push(samples)
        self._since_update += samples.size

    def maybe_run_inference(self) -> Optional[EmotionPrediction]:
        """Classify the most recent window if enough audio is buffered.

        Returns None without a model or while the buffer is still filling.
        """
        if self.model_forward is None:
            return None
        required = self.audio_config.required_samples
        missing = self.ring.missing(required)
        if missing:
            logger.debug("Need %d more samples for inference...", missing)
            return None

        window = self.ring.latest(required)
        features = self.extractor.extract_model_input(window)
        output = self.model_forward(features)
        prediction = EmotionPrediction.from_output(output, self.labels)
        self.last_prediction = prediction
        self.on_prediction(prediction)
        return prediction

    def _process_chunk(self, chunk: np.ndarray) -> Optional[EmotionPrediction]:
        self.push(chunk)
        if self._since_update < self.streaming_config.update_samples:
            return None
        prediction = self.maybe_run_inference()
        if prediction is not None:
            self._since_update = 0
        return prediction

    def run(
        self,
        audio_iterator: Optional[Iterator[np.ndarray]] = None,
        device: Optional[int] = None,
    ) -> None:
        """Run the streaming loop until stopped or iterator exhausted.

        Args:
            audio_iterator: If provided, use this as the source of audio chunks.
                If None, use microphone via audio_collector.record_stream().
            device: Microphone device index when using live audio (ignored if
                audio_iterator is provided).
        """
        self._stopped = False
        if audio_iterator is None:
            audio_iterator = self.audio_collector.record_stream(
                chunk_duration_sec=self.streaming_config.chunk_duration_sec,
                device=device,
            )
        for chunk in audio_iterator:
            if self._stopped:
                break
            self._process_chunk(chunk)

    def run_for_n_updates(
        self,
        n: int,
        audio_iterator: Iterator[np.ndarray],
    ) -> List[EmotionPrediction]:
        """Run for exactly n predictions; used for tests. Returns the predictions."""
        self._stopped = False
        predictions: List[EmotionPrediction] = []
        for chunk in audio_iterator:
            if len(predictions) >= n:
                break
            prediction = self._process_chunk(chunk)
            if prediction is not None:
                predictions.append(prediction)
        return predictions

    def run_from_file(self, path: str) -> List[EmotionPrediction]:
        """Stream a WAV file through the pipeline in capture-sized blocks."""
        self._stopped = False
        audio = self.audio_collector.load_wav(path)
        block = self.audio_config.capture_block_size
        chunks = (audio[i : i + block] for i in range(0, len(audio), block))
        predictions: List[EmotionPrediction] = []
        for chunk in chunks:
            if self._stopped:
                break
            prediction = self._process_chunk(chunk)
            if prediction is not None:
                predictions.append(prediction)
        return predictions
