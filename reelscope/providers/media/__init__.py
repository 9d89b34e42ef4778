from reelscope.providers.media.ffprobe_provider import FFprobeProvider

__all__ = ["FFprobeProvider"]
