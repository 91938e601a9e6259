"""Export module for JSON reports and PNG images."""
from export.image_exporter import export_images, save_pixel_buffer
from export.json_exporter import export_json, report_to_dict

__all__ = ["export_images", "export_json", "report_to_dict", "save_pixel_buffer"]
