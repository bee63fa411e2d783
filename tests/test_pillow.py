import pytest
from PIL import Image

import tgaimage
from tgaimage import Color, TGAImage, UnsupportedFormatError


def sample(mode="RGBA", size=(4, 3)):
    img = Image.new(mode, size)
    width, height = size
    for y in range(height):
        for x in range(width):
            px = (x * 60, y * 80, (x + y) * 20, 255 - x * 10)
            img.putpixel((x, y), px if mode == "RGBA" else px[:3])
    return img


def assert_same_pixels(tga, pil):
    width, height = pil.size
    for y in range(height):
        for x in range(width):
            expected = pil.getpixel((x, y))
            assert tuple(tga.get_color(height - 1 - y, x))[: len(expected)] == expected


@pytest.mark.parametrize("options", [
    {},
    {"compression": "tga_rle"},
    {"orientation": 1},
    {"compression": "tga_rle", "orientation": 1},
])
def test_reads_pillow_rgba_files(tmp_path, options):
    src = sample()
    path = tmp_path / "pil.tga"
    src.save(path, format="TGA", **options)

    img = tgaimage.load(path)
    assert img.header.image_type == 2
    assert img.header.image_spec.descriptor & 0x30 == 0
    assert_same_pixels(img, src)


def test_reads_pillow_rgb_files(tmp_path):
    src = sample("RGB", (5, 2))
    path = tmp_path / "pil.tga"
    src.save(path, format="TGA", compression="tga_rle")

    img = tgaimage.load(path)
    assert img.bytes_per_pixel == 3
    assert_same_pixels(img, src)


def test_pillow_reads_saved_files(tmp_path):
    img = TGAImage.blank(3, 2, (0, 0, 0, 255))
    img.set_pixel(0, 0, Color(255, 0, 0, 255))
    img.set_pixel(1, 2, Color(0, 0, 255, 128))
    path = tmp_path / "ours.tga"
    img.save(path)

    with Image.open(path) as pil:
        pil.load()
        assert pil.size == (3, 2)
        assert pil.mode == "RGBA"
        assert pil.getpixel((0, 1)) == (255, 0, 0, 255)
        assert pil.getpixel((2, 0)) == (0, 0, 255, 128)


def test_to_pil_is_top_down():
    img = TGAImage.blank(2, 2, (0, 0, 0, 255))
    img.set_pixel(0, 1, Color(1, 2, 3, 4))
    pil = img.to_pil()
    assert pil.mode == "RGBA"
    assert pil.getpixel((1, 1)) == (1, 2, 3, 4)
    assert pil.getpixel((1, 0)) == (0, 0, 0, 255)


def test_from_pil_round_trip():
    src = sample("RGB")
    img = TGAImage.from_pil(src)
    assert img.header.image_spec.bits_per_pixel == 32
    assert img.header.alpha_depth == 8
    assert_same_pixels(img, src.convert("RGBA"))
    assert img.to_pil().tobytes() == src.convert("RGBA").tobytes()


def test_to_pil_rejects_16_bit(tmp_path):
    data = bytearray(b"\x00" * 18)
    data[2] = 2
    data[12] = 1
    data[14] = 1
    data[16] = 16
    path = tmp_path / "16.tga"
    path.write_bytes(bytes(data) + b"\x00\x00")
    img = tgaimage.load(path)
    with pytest.raises(UnsupportedFormatError):
        img.to_pil()
