#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Expression assembler: registration of the trial and test spaces, sizing of
the global sparse system and element-by-element integration of expression
terms over the patches, their boundary sides and their interfaces.

Typical use::

    A = ExprAssembler()
    u = A.get_space(mbasis)
    u.setup(bc, 'interpolation')
    A.init_system()
    A.assemble(stiffness(u), load(u, f))
    A.assemble_boundary(bc.neumann_sides(), boundary_load(u, A.get_bdr_function()))
    M, b = A.give_matrix(), A.give_rhs()

"""
import logging
import math
import warnings
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from igaexpr.api.context           import ElementData
from igaexpr.api.expr              import Coefficient, MutableCoefficient, Solution
from igaexpr.api.settings          import (IGAEXPR_DEFAULT_OPTIONS, IGAEXPR_OPTION_TYPES,
                                           DIRICHLET_USER)
from igaexpr.api.space             import FeSpace
from igaexpr.fem.basic             import FemBasis
from igaexpr.fem.multipatch        import MultiPatchBasis
from igaexpr.fem.topology          import BoundaryCondition, PatchInterface
from igaexpr.linalg.sparse         import SparseSystem, BlockView, push
from igaexpr.utilities.quadratures import get_quad_rule

__all__ = ('ExprAssembler',)

logger = logging.getLogger(__name__)

#==============================================================================
class _Job:
    """ Elements of one patch, side or interface visited in a pass. """

    __slots__ = ('patch', 'side', 'rule', 'elements', 'iface', 'source')

    def __init__(self, patch, side, rule, elements, iface=None, source=None):
        self.patch    = patch
        self.side     = side
        self.rule     = rule
        self.elements = elements
        self.iface    = iface
        self.source   = source

#==============================================================================
class ExprAssembler:
    """
    Parameters
    ----------
    row_blocks : int
        Number of test spaces.

    col_blocks : int
        Number of trial spaces (unknowns).

    """
    def __init__(self, row_blocks=1, col_blocks=1):

        assert row_blocks >= 1 and col_blocks >= 1

        self._options  = self.default_options()
        self._vrow     = [None] * row_blocks
        self._vcol     = [None] * col_blocks
        self._elements = None
        self._mappings = None
        self._bdr_func = MutableCoefficient()
        self._system   = None

    #--------------------------------------------------------------------------
    # Options
    #--------------------------------------------------------------------------
    @staticmethod
    def default_options():
        return dict(IGAEXPR_DEFAULT_OPTIONS)

    def options(self):
        return self._options

    def set_options(self, options):
        for key, value in options.items():
            if key not in IGAEXPR_OPTION_TYPES:
                raise KeyError("Unknown option '{}'".format(key))
            if isinstance(value, bool) or not isinstance(value, IGAEXPR_OPTION_TYPES[key]):
                raise TypeError("Option '{}' expects {}, got {!r}"
                                .format(key, IGAEXPR_OPTION_TYPES[key], value))
        self._options.update(options)

    #--------------------------------------------------------------------------
    # Domain of integration and geometry
    #--------------------------------------------------------------------------
    def set_integration_elements(self, mbasis):
        if isinstance(mbasis, FemBasis):
            mbasis = MultiPatchBasis([mbasis])
        self._elements = mbasis

    def integration_elements(self):
        if self._elements is None:
            raise RuntimeError('Integration elements are not set.')
        return self._elements

    def get_map(self, mappings):
        """ Register the geometry: one mapping per patch (or one for all). """
        if not isinstance(mappings, (list, tuple)):
            mappings = [mappings] * (self._elements.nbases if self._elements else 1)
        self._mappings = list(mappings)
        return self._mappings

    #--------------------------------------------------------------------------
    # Spaces
    #--------------------------------------------------------------------------
    def _strategies(self):
        return dict(dirichlet=self._options['DirichletValues'],
                    interface=self._options['InterfaceStrategy'])

    def get_space(self, function_set, dim=1, id=0):
        """ Register a space as both trial and test space of block `id`. """
        if not 0 <= id < len(self._vrow) or id >= len(self._vcol):
            raise ValueError('Given id {} exceeds {}'.format(id, min(len(self._vrow), len(self._vcol)) - 1))

        space = FeSpace(function_set, dim, id, **self._strategies())
        self._vrow[id] = self._vcol[id] = space
        if self._elements is None:
            self._elements = space.basis
        return space

    def get_test_space(self, trial, function_set, dim=None):
        """ Register a test space distinct from the trial space `trial`. """
        space = FeSpace(function_set, trial.dim if dim is None else dim, trial.id,
                        **self._strategies())
        self._vrow[trial.id] = space
        return space

    def trial_space(self, id):
        if not 0 <= id < len(self._vcol) or self._vcol[id] is None:
            raise RuntimeError('Trial space {} is not set.'.format(id))
        return self._vcol[id]

    def test_space(self, id):
        if not 0 <= id < len(self._vrow) or self._vrow[id] is None:
            raise RuntimeError('Test space {} is not set.'.format(id))
        return self._vrow[id]

    def get_coeff(self, f, ncomp=1, parametric=False):
        return Coefficient(f, ncomp, parametric)

    def get_bdr_function(self, ncomp=None):
        """ Handle on the source function of the boundary condition being visited. """
        if ncomp is not None:
            self._bdr_func.ncomp = ncomp
        return self._bdr_func

    def get_solution(self, space, vector):
        return Solution(space, vector)

    #--------------------------------------------------------------------------
    # Fixed DOFs
    #--------------------------------------------------------------------------
    def set_fixed_dof_vector(self, values, unk=0):
        """ Move `values` into the fixed DOFs of trial space `unk`. """
        space = self.trial_space(unk)
        space.fixed_dofs = np.array(values, dtype=float)
        if isinstance(values, np.ndarray) and values.flags.owndata:
            values.resize(0, refcheck=False)

    def set_fixed_dofs(self, coefs, unk=0, patch=0):
        """
        Copy the coefficients of the Dirichlet sides of `patch` from a
        (patch size x dim) coefficient matrix.

        """
        if self._options['DirichletValues'] != DIRICHLET_USER:
            raise ValueError('set_fixed_dofs requires DirichletValues == {} (user)'.format(DIRICHLET_USER))

        space  = self.trial_space(unk)
        mapper = space.mapper
        fixed  = space.fixed_dofs
        nb     = mapper.boundary_size()
        coefs  = np.asarray(coefs, dtype=float).reshape(space.basis.basis(patch).size, space.dim)

        if fixed.size != space.dim * nb:
            raise ValueError('Fixed DOFs were not initialized.')

        for bc in space.bc.dirichlet_sides():
            if bc.patch != patch:
                continue
            idx = space.basis.basis(patch).boundary(*bc.side.side)
            b   = np.array([mapper.bindex(i, patch) for i in idx], dtype=int)
            for c in range(space.dim):
                fixed[c * nb + b] = coefs[idx, c]

    #--------------------------------------------------------------------------
    # Sizes
    #--------------------------------------------------------------------------
    def _check_spaces(self):
        for role, slots in (('trial', self._vcol), ('test', self._vrow)):
            for i, s in enumerate(slots):
                if s is None:
                    raise RuntimeError('No {} space registered for block {}.'.format(role, i))

    def reset_dimensions(self):
        """ Recompute the global index shift of every block. """
        self._check_spaces()
        self._vcol[0].mapper.set_shift(0)
        if self._vrow[0] is not self._vcol[0]:
            self._vrow[0].mapper.set_shift(0)

        for i in range(1, len(self._vcol)):
            prev = self._vcol[i-1]
            self._vcol[i].mapper.set_shift(prev.mapper.first_index() + prev.dim * prev.mapper.free_size())

        for i in range(1, len(self._vrow)):
            if i < len(self._vcol) and self._vrow[i] is self._vcol[i]:
                continue
            prev = self._vrow[i-1]
            self._vrow[i].mapper.set_shift(prev.mapper.first_index() + prev.dim * prev.mapper.free_size())

    def num_dofs(self):
        last = self.trial_space(len(self._vcol) - 1)
        if not last.mapper.is_finalized():
            raise RuntimeError('init_system() has not been called.')
        return last.mapper.first_index() + last.dim * last.mapper.free_size()

    def num_test_dofs(self):
        last = self.test_space(len(self._vrow) - 1)
        if not last.mapper.is_finalized():
            raise RuntimeError('init_system() has not been called.')
        return last.mapper.first_index() + last.dim * last.mapper.free_size()

    def num_blocks(self):
        self._check_spaces()
        return sum(s.dim for s in self._vrow)

    def reserved_per_column(self):
        """ Expected number of non-zeros per column of the matrix. """
        opts = self._options
        mb   = self.integration_elements()
        nz   = 1.0
        for d in range(mb.ldim):
            nz *= opts['bdA'] * mb.max_degree(d) + opts['bdB']
        return self.num_blocks() * int(math.ceil(nz * (1.0 + opts['bdO'])))

    #--------------------------------------------------------------------------
    # System
    #--------------------------------------------------------------------------
    def init_matrix(self):
        """ Size the matrix to (num_test_dofs, num_dofs); drops any right-hand side. """
        self.reset_dimensions()
        shape = (self.num_test_dofs(), self.num_dofs())

        if 0 in shape:
            warnings.warn('No internal DOFs, zero sized system.', RuntimeWarning)
            self._system = SparseSystem(shape)
        else:
            self._system = SparseSystem(shape, self.reserved_per_column())

        logger.debug('init_matrix: shape %s, %d reserved per column', shape, self._system.reserve_per_column)

    def init_vector(self, num_rhs=1):
        """ Size and zero the right-hand side only. """
        self.reset_dimensions()
        if self._system is None:
            self._system = SparseSystem((self.num_test_dofs(), self.num_dofs()))
        self._system.init_rhs(num_rhs)

    def init_system(self):
        self.init_matrix()
        self._system.init_rhs(1)

    def _require_system(self):
        if self._system is None:
            raise RuntimeError('System not initialized: call init_system() first.')
        return self._system

    def matrix(self):
        return self._require_system().matrix

    def rhs(self):
        return self._require_system().rhs

    def give_matrix(self):
        return self._require_system().give_matrix()

    def give_rhs(self):
        return self._require_system().give_rhs()

    def clean_up(self):
        """ Release the system and reset the boundary function. """
        self._system = None
        self._bdr_func.set(None)

    def matrix_block_view(self):
        """
        Partition of the matrix into the blocks of the registered spaces or,
        for a single scalar block, into free-interior / coupled / boundary
        DOFs.

        """
        system = self._require_system()
        self._check_spaces()
        if not all(s.mapper.is_finalized() for s in self._vcol + self._vrow):
            raise RuntimeError('init_system() has not been called.')

        # Components are stacked, so the categories are contiguous for scalar spaces only
        split = len(self._vrow) == len(self._vcol) == 1 and self._vcol[0].dim == 1

        def sizes(spaces):
            if split:
                m = spaces[0].mapper
                return [m.free_size() - m.coupled_size(), m.coupled_size(), m.boundary_size()]
            return [s.dim * s.mapper.free_size() for s in spaces]

        return BlockView(system.matrix, sizes(self._vrow), sizes(self._vcol))

    #--------------------------------------------------------------------------
    # Traversal
    #--------------------------------------------------------------------------
    def _worker(self, job, boxes, terms, system, fraction):

        ctx = ElementData(self._mappings, self.integration_elements().ldim)
        if job.iface is not None:
            ctx.iface = ElementData(self._mappings, self.integration_elements().ldim)
        bound = [t.bind(ctx) for t in terms]
        acc   = system.accumulator(fraction)

        mb = self.integration_elements()
        skipped = 0
        for lower, upper in boxes:
            points, weights = job.rule.map_to(lower, upper)
            if weights.size == 0:
                skipped += 1
                continue

            ctx.precompute(job.patch, lower, upper, points, job.side)
            if job.iface is not None:
                iface = job.iface
                bm, bp = mb.basis(iface.minus.patch), mb.basis(iface.plus.patch)
                lo, up = iface.map_box(lower, upper, bm, bp)
                ctx.iface.precompute(iface.plus.patch, lo, up,
                                     iface.map_points(points, bm, bp), iface.plus.side)

            for term in bound:
                self._integrate(acc, term, weights)

        system.merge(acc)
        return skipped

    @staticmethod
    def _integrate(acc, term, weights):
        """ Sum the term over the points of an element and push the result. """
        rspace, rpatch, rdata = term.row_data()
        rows = rspace.global_indices(rdata.actives, rpatch)

        local = weights[0] * term.evaluate(0)
        for k in range(1, weights.size):
            local = local + weights[k] * term.evaluate(k)

        if term.is_matrix():
            cspace, cpatch, cdata = term.col_data()
            cols = cspace.global_indices(cdata.actives, cpatch)
            push(acc, local, rows, rspace.mapper, cols, cspace.mapper, cspace.fixed_dofs)
        else:
            push(acc, local, rows, rspace.mapper)

    def _traverse(self, jobs, terms):
        """ Integrate the terms over the elements of the jobs. """
        system = self._require_system()
        terms  = [t for t in terms if t is not None]
        if not terms:
            return

        if self._system.shape[1] != self.num_dofs():
            raise RuntimeError('System not initialized: call init_system() first.')

        nthreads = max(1, int(self._options['nthreads']))
        nelem    = max(1, sum(b.num_elements for b in self.integration_elements().bases))
        for job in jobs:
            if job.source is not None:
                self._bdr_func.set(job.source.function, job.source.parametric)

            if nthreads == 1:
                skipped = self._worker(job, job.elements, terms, system, len(job.elements) / nelem)
            else:
                chunks = [job.elements[i::nthreads] for i in range(nthreads)]
                with ThreadPoolExecutor(max_workers=nthreads) as executor:
                    futures = [executor.submit(self._worker, job, chunk, terms, system, len(chunk) / nelem)
                               for chunk in chunks]
                    skipped = sum(f.result() for f in futures)

            logger.debug('Pass on patch %d, side %s: %d elements, %d skipped',
                         job.patch, job.side, len(job.elements), skipped)

        system.make_compressed()

    #--------------------------------------------------------------------------
    # Assembly
    #--------------------------------------------------------------------------
    def assemble(self, *terms):
        """ Integrate the terms over the whole domain. """
        mb   = self.integration_elements()
        jobs = [_Job(p, None, get_quad_rule(b, self._options), b.element_boxes())
                for p, b in enumerate(mb.bases)]
        self._traverse(jobs, _flatten(terms))

    def _boundary_jobs(self, bcs):
        mb   = self.integration_elements()
        jobs = []
        for bc in bcs:
            if not isinstance(bc, BoundaryCondition):
                raise TypeError('Expected BoundaryCondition, got {!r}'.format(bc))
            basis = mb.basis(bc.patch)
            axis  = bc.side.axis
            jobs.append(_Job(bc.patch, bc.side.side,
                             get_quad_rule(basis, self._options, fix_dir=axis),
                             basis.element_boxes(side=bc.side.side), source=bc))
        return jobs

    def assemble_boundary(self, bcs, *terms):
        """
        Integrate the terms over the sides of the boundary conditions `bcs`;
        the boundary function handle takes the function of each condition in
        turn.

        """
        self._traverse(self._boundary_jobs(bcs), _flatten(terms))

    def assemble_lhs_rhs_bc(self, lhs, rhs, bcs):
        self._traverse(self._boundary_jobs(bcs), _flatten([lhs, rhs]))

    def assemble_rhs_bc(self, rhs, bcs):
        for t in _flatten([rhs]):
            if not t.is_vector():
                raise ValueError('assemble_rhs_bc expects vector valued terms')
        self._traverse(self._boundary_jobs(bcs), _flatten([rhs]))

    def _interface_jobs(self, interfaces):
        mb = self.integration_elements()
        interfaces = mb.interfaces if interfaces is None else interfaces
        jobs = []
        for iface in interfaces:
            if not isinstance(iface, PatchInterface):
                raise TypeError('Expected PatchInterface, got {!r}'.format(iface))
            bm, bp = mb.basis(iface.minus.patch), mb.basis(iface.plus.patch)
            jobs.append(_Job(iface.minus.patch, iface.minus.side,
                             get_quad_rule(bm, self._options, fix_dir=iface.minus.axis),
                             iface.element_boxes(bm, bp), iface=iface))
        return jobs

    def assemble_interface(self, *terms, interfaces=None):
        """
        Integrate the terms over the interfaces (all interfaces of the
        integration elements by default). Terms refer to the second side of
        an interface with `space.plus()`.

        """
        self._traverse(self._interface_jobs(interfaces), _flatten(terms))

    def assemble_rhs_interface(self, rhs, interfaces):
        for t in _flatten([rhs]):
            if not t.is_vector():
                raise ValueError('assemble_rhs_interface expects vector valued terms')
        self._traverse(self._interface_jobs(interfaces), _flatten([rhs]))

#==============================================================================
def _flatten(terms):
    out = []
    for t in terms:
        if isinstance(t, (list, tuple)):
            out.extend(_flatten(t))
        elif t is not None:
            out.append(t)
    return out
