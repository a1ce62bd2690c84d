#!/usr/bin/python3

import numpy  as np
from scipy.optimize import newton
from typing import Any, Callable

class ConvergenceError(Exception):
    r"""
    Exception raised when a root finder fails to converge. Parameters of the problem
    being solved, if any, are available as the `params` dict.
    """

    def __init__(self, msg: str, **params: Any) -> None:
        super().__init__(msg)
        self.params = params

    def __str__(self) -> str:
        msg = super().__str__()
        if not self.params:
            return msg
        return f"{msg} ({', '.join(f'{key} = {value!r}' for key, value in self.params.items())})"

###################################################################################################
#									     Numerical Tools										  #
###################################################################################################

# Root finding
class RootFinder:
    r"""
    Base class to represent a root finding method.

    Parameters
    ----------
    reltol: float, default = 1e-6
        Relative tolerance for convergenece.
    maxiter: int, default = 10000
        Maximum iterations to use.

    """
    __slots__ = 'reltol', 'maxiter'

    def __init__(self,
                 reltol: float = 1e-06,
                 maxiter: int = 10_000, ) -> None:
        # error tolerance
        self.reltol = reltol
        # maximum iteration
        self.maxiter = maxiter

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(reltol={self.reltol}, maxiter={self.maxiter})"

    def rootof(self,
               func: Callable,
               x0: float,
               fprime: Callable | None = None,
               args: tuple = None, ) -> float:
        r"""
        Return the root of a function.

        Parameters
        ----------
        func: callable
        x0: float
            Starting point for the search.
        fprime: callable, optional
            Derivative of the function, for methods using it.
        args: tuple, optional
            Additional arguments passed to the function.

        Returns
        -------
        res: float
            Root of the function.

        Raises
        ------
        ConvergenceError

        """
        raise NotImplementedError()

class Newton(RootFinder):
    r"""
    A root finder based on the Newton-Raphson method, using `scipy.optimize.newton` with
    the analytic derivative of the function. Convergence is reached when the step is smaller
    than `reltol`, in absolute terms. For a function of a log variable, that is a relative
    tolerance on the original variable.

    Parameters
    ----------
    reltol: float, default = 1e-9
        Tolerance for convergenece.
    maxiter: int, default = 100
        Maximum iterations to use.

    """
    __slots__ = ()

    def __init__(self,
                 reltol: float = 1e-09,
                 maxiter: int = 100, ) -> None:
        super().__init__(reltol, maxiter)

    def rootof(self,
               func: Callable,
               x0: float,
               fprime: Callable | None = None,
               args: tuple = None, ) -> float:
        if fprime is None:
            raise TypeError("newton method requires the derivative 'fprime'")
        args = args or ()
        with np.errstate(divide = 'ignore', invalid = 'ignore', over = 'ignore'):
            res, info = newton(func,
                               x0,
                               fprime      = fprime,
                               args        = args,
                               tol         = self.reltol,
                               maxiter     = self.maxiter,
                               full_output = True,
                               disp        = False, )
        if not info.converged:
            raise ConvergenceError(f"newton iterations failed after {info.iterations} steps: {info.flag}")
        if not np.isfinite(res):
            raise ConvergenceError(f"newton iterations diverged: x = {res}")
        return float(res)
