class GenerationError(RuntimeError):
    """Base class for failures coming back from a hosted model."""


class EmptyModelResponseError(GenerationError):
    pass


class MalformedModelResponseError(GenerationError):
    pass


class ImageGenerationError(GenerationError):
    pass
