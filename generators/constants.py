DEFAULT_IMAGE_MODEL = (
    "sundai-club/snow_bunny:"
    "166808a65c69a9258c4fe45a4ffd6eeb1579257fadd3c57d388fff41ae529c6a"
)
