from models.medication import Medication
from models.medication_audit import MedicationAudit
from models.diagnosis import Diagnosis
from models.prescription_item import PrescriptionItem
from models.medication_compliance import MedicationCompliance

__all__ = ['Diagnosis', 'Medication', 'MedicationAudit', 'MedicationCompliance', 'PrescriptionItem',]
