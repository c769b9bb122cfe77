from opdnd.data.reference_data import ReferenceData

__all__ = ["ReferenceData"]
