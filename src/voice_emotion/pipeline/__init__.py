"""End-to-end streaming emotion pipeline."""

from voice_emotion.pipeline.streaming_loop import StreamingConfig, StreamingEmotionPipeline

__all__ = ["StreamingConfig", "StreamingEmotionPipeline"]
