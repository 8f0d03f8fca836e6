from dental_chart.models.base import Base
from dental_chart.models.ui_preference import UiPreference
