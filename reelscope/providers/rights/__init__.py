from reelscope.providers.rights.acrcloud_provider import ACRCloudProvider

__all__ = ["ACRCloudProvider"]
