class NotInvertibleError(ValueError):
    """Raised by AffineTransform.invert() when the linear part is singular.

    Attributes:
        determinant: determinant of the 2x2 linear part that was rejected
        epsilon: threshold the absolute determinant had to exceed
    """

    def __init__(self, determinant: float, epsilon: float) -> None:
        self.determinant = determinant
        self.epsilon = epsilon
        super().__init__(
            f"transform is not invertible: |det| = {abs(determinant):.3e} <= {epsilon:g}")
