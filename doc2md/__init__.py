from doc2md.services.converter import Doc2MdConverter, convert_document, convert_elements

__all__ = ["Doc2MdConverter", "convert_document", "convert_elements"]
