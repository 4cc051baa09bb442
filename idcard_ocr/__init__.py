"""ID Card OCR Service.

A small HTTP service combining Tesseract OCR, OpenCV enhancement, and
regex heuristics to read the name, date of birth, ID number, and blood
group off identity card images.
"""

__version__ = "1.0.0"
