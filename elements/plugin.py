from core.errors import Invalid
from elements.element import Element


class Plugin(Element):
    xml_tag_name = "plugin"

    @property
    def filename(self) -> str:
        filename = self.xml.get("filename")
        if filename is None:
            raise Invalid(f"expected attribute 'filename' missing on {self}")
        return filename
