from enum import Enum


class BoundaryMode(str, Enum):
    """Обработка соседей за правой/нижней границей сетки."""

    WRAPPED = 'wrapped'  # Индексы соседей берутся по модулю ширины/высоты
    CLAMPED = 'clamped'  # Отсутствующий сосед равен порогу


class HoleNesting(str, Enum):
    """Правило вложения замкнутых цепочек в полигоны."""

    LAST_OUTER = 'last_outer'  # Только внутрь последнего внешнего контура
    ANY_OUTER = 'any_outer'  # Внутрь любого ранее найденного внешнего контура


class OutputKind(str, Enum):
    SEGMENTS = 'segments'
    POLYGONS = 'polygons'


# Человекочитаемые названия для CLI
BOUNDARY_MODE_LABELS: dict[BoundaryMode, str] = {
    BoundaryMode.WRAPPED: 'wrap around (torus)',
    BoundaryMode.CLAMPED: 'clamp to threshold',
}

# --- Marching squares

# Смещение к центру ячейки при переводе в мировые координаты
CELL_CENTER_OFFSET = 0.5

# Количество вариантов классификации ячейки
MS_CASE_COUNT = 16

# Битовые маски (бит = угол выше порога)
MS_MASK_EMPTY = 0  # 0b0000: все ниже уровня
MS_MASK_FULL = 15  # 0b1111: все выше уровня

# Одиночные углы
MS_MASK_TL = 1  # 0b0001: только верхний левый
MS_MASK_TR = 2  # 0b0010: только верхний правый
MS_MASK_BR = 4  # 0b0100: только нижний правый
MS_MASK_BL = 8  # 0b1000: только нижний левый

# Пары соседних углов
MS_MASK_TOP = 3  # 0b0011: TL+TR
MS_MASK_RIGHT = 6  # 0b0110: TR+BR
MS_MASK_BOTTOM = 12  # 0b1100: BL+BR
MS_MASK_LEFT = 9  # 0b1001: TL+BL

# Диагональные пары (седловые случаи)
MS_MASK_TL_BR = 5  # 0b0101
MS_MASK_TR_BL = 10  # 0b1010

# Три угла из четырёх
MS_MASK_NOT_TL = 14  # 0b1110
MS_MASK_NOT_TR = 13  # 0b1101
MS_MASK_NOT_BR = 11  # 0b1011
MS_MASK_NOT_BL = 7  # 0b0111

# Ячейки без изолинии
MS_NO_CONTOUR_CASES = frozenset({MS_MASK_EMPTY, MS_MASK_FULL})

# Седловые случаи: маршрут через ячейку зависит от направления входа
MS_SADDLE_CASES = (MS_MASK_TL_BR, MS_MASK_TR_BL)

# Предыдущие случаи, после которых седло 5 проходится вправо
MS_SADDLE_TL_BR_RIGHT_AFTER = (MS_MASK_TR, MS_MASK_RIGHT, MS_MASK_NOT_TL)  # (2, 6, 14)

# Предыдущие случаи, после которых седло 10 проходится вверх
MS_SADDLE_TR_BL_UP_AFTER = (MS_MASK_TL, MS_MASK_TOP, MS_MASK_NOT_BL)  # (1, 3, 7)

# Число проходов, после которого седловая ячейка считается пройденной
MS_SADDLE_MAX_PASSES = 2

# --- Defaults

# Размер ячейки в мировых единицах
DEFAULT_CELL_SIZE = 1.0

# Обработка границы по умолчанию
DEFAULT_BOUNDARY_MODE = BoundaryMode.WRAPPED

# Порог по умолчанию
DEFAULT_THRESHOLD = 0.5

# Параллельная обработка независимых уровней (не одного прохода)
CONTOUR_PARALLEL_WORKERS = 4

# --- Profiles / logging

APP_DIR_NAME = 'isocontours'

PROFILE_SUFFIX = '.toml'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
