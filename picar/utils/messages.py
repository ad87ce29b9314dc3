"""Message templates for the gallery commands."""

GALLERY_COMMAND = "goodpic"
PAGE_SIZE = 10


def help_message() -> str:
    """Help page for /goodpic."""
    return f"""/{GALLERY_COMMAND} help:
- /{GALLERY_COMMAND} random <tag>: get a random image with the given tag
- /{GALLERY_COMMAND} view <tag> [page]: browse every image under a tag
- /{GALLERY_COMMAND} list: list all image tags
- /{GALLERY_COMMAND} add <tag>: add images to a tag
- /{GALLERY_COMMAND} help: show this help page"""


def no_images_message() -> str:
    return "No images found, add some first"


def view_usage_message() -> str:
    return f'That is a bad pic. Use "/{GALLERY_COMMAND} view <tag> [page]"'


def add_usage_message() -> str:
    return f'That is a bad pic. Use "/{GALLERY_COMMAND} add <tag>"'


def tag_empty_message(tag: str) -> str:
    return f"No images under tag {tag}, add some first"


def page_out_of_range_message(page: int, total_pages: int) -> str:
    return f"Page {page} is out of range, there are {total_pages} pages"


def page_info_message(tag: str, page: int, total_pages: int, total_images: int) -> str:
    """Footer of a /goodpic view page."""
    if page < total_pages:
        hint = f"Next page: /{GALLERY_COMMAND} view {tag} {page + 1}"
    else:
        hint = "This is the last page"
    return f"\n[Page {page}/{total_pages}, {total_images} images in total]\n{hint}"


def no_tags_message() -> str:
    return "There are no good pics yet, add some images first"


def tag_list_message(tags) -> str:
    lines = ["All good pic tags:"]
    lines.extend(f"- {tag}" for tag in tags)
    return "\n".join(lines) + "\n"


def no_attachments_message() -> str:
    return "No image detected, send an image or reply to a message that contains one"


def images_added_message(tag: str, count: int) -> str:
    return f"Good pics added to {tag}, {count} images in total"
