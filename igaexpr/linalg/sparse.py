#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
"""
Global sparse linear system filled during assembly.

Contributions are collected as (row, col, value) triplets in one
`TripletAccumulator` per worker; the accumulators are merged into the shared
`SparseSystem` at the end of a pass and compacted into a CSR matrix. All
writes are commutative additions, so the order in which workers are merged
only affects rounding.

"""
import logging
import math
import threading

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

__all__ = ('TripletAccumulator', 'SparseSystem', 'BlockView', 'push')

logger = logging.getLogger(__name__)

#==============================================================================
class TripletAccumulator:
    """
    Growable buffers of matrix triplets and right-hand-side contributions,
    owned by a single worker.

    Parameters
    ----------
    capacity : int
        Number of matrix triplets preallocated.

    has_rhs : bool
        Whether right-hand-side contributions may be accumulated.

    """
    def __init__(self, capacity=0, has_rhs=False):

        capacity = max(int(capacity), 16)

        self._rows = np.empty(capacity, dtype=int)
        self._cols = np.empty(capacity, dtype=int)
        self._vals = np.empty(capacity, dtype=float)
        self._n    = 0

        self._has_rhs  = has_rhs
        self._rhs_rows = []
        self._rhs_cols = []
        self._rhs_vals = []

    #--------------------------------------------------------------------------
    @property
    def nnz(self):
        """ Number of stored matrix triplets (duplicates included). """
        return self._n

    @property
    def capacity(self):
        return self._vals.size

    @property
    def has_rhs(self):
        return self._has_rhs

    def triplets(self):
        n = self._n
        return self._rows[:n], self._cols[:n], self._vals[:n]

    def rhs_entries(self):
        if not self._rhs_vals:
            empty = np.zeros(0, dtype=int)
            return empty, empty, np.zeros(0)
        return (np.concatenate(self._rhs_rows),
                np.concatenate(self._rhs_cols),
                np.concatenate(self._rhs_vals))

    #--------------------------------------------------------------------------
    def _grow(self, needed):
        size = self.capacity
        while size < needed:
            size *= 2
        for name in ('_rows', '_cols', '_vals'):
            old = getattr(self, name)
            new = np.empty(size, dtype=old.dtype)
            new[:self._n] = old[:self._n]
            setattr(self, name, new)

    def add(self, rows, cols, vals):
        """ Append matrix triplets. """
        k = len(vals)
        if self._n + k > self.capacity:
            self._grow(self._n + k)
        self._rows[self._n:self._n+k] = rows
        self._cols[self._n:self._n+k] = cols
        self._vals[self._n:self._n+k] = vals
        self._n += k

    def add_rhs(self, rows, vals, cols=0):
        """ Append right-hand-side contributions. """
        if not self._has_rhs:
            raise RuntimeError('Right-hand side is not initialized: call init_vector() or init_system().')
        rows = np.asarray(rows, dtype=int)
        self._rhs_rows.append(rows)
        self._rhs_cols.append(np.broadcast_to(np.asarray(cols, dtype=int), rows.shape))
        self._rhs_vals.append(np.asarray(vals, dtype=float))

    def clear(self):
        self._n = 0
        self._rhs_rows.clear()
        self._rhs_cols.clear()
        self._rhs_vals.clear()

#==============================================================================
class SparseSystem:
    """
    Global matrix of shape (nrows, ncols) with a dense right-hand side of
    shape (nrows, nrhs).

    Parameters
    ----------
    shape : tuple (nrows, ncols)

    reserve_per_column : int
        Expected number of non-zeros per column, used to preallocate the
        triplet buffers of the workers.

    """
    def __init__(self, shape, reserve_per_column=0):

        self._shape   = tuple(int(n) for n in shape)
        self._reserve = int(reserve_per_column)
        self._matrix  = csr_matrix(self._shape)
        self._rhs     = None
        self._pending = []

        self._matrix_lock = threading.Lock()
        self._rhs_lock    = threading.Lock()

    #--------------------------------------------------------------------------
    @property
    def shape(self):
        return self._shape

    @property
    def reserve_per_column(self):
        return self._reserve

    @property
    def matrix(self):
        return self._matrix

    @property
    def rhs(self):
        return self._rhs

    def has_rhs(self):
        return self._rhs is not None

    def init_rhs(self, nrhs=1):
        self._rhs = np.zeros((self._shape[0], int(nrhs)))

    #--------------------------------------------------------------------------
    def accumulator(self, fraction=1.0):
        """ New accumulator sized for `fraction` of the elements of the domain. """
        capacity = int(math.ceil(self._reserve * self._shape[1] * min(max(fraction, 0.0), 1.0)))
        return TripletAccumulator(capacity, has_rhs=self.has_rhs())

    def merge(self, acc):
        """ Add the contributions of a worker; safe to call from several threads. """
        if acc.nnz:
            rows, cols, vals = (a.copy() for a in acc.triplets())
            with self._matrix_lock:
                self._pending.append((rows, cols, vals))

        rows, cols, vals = acc.rhs_entries()
        if vals.size:
            with self._rhs_lock:
                np.add.at(self._rhs, (rows, cols), vals)

        acc.clear()

    def make_compressed(self):
        """ Sum the merged triplets into the CSR matrix. """
        with self._matrix_lock:
            if self._matrix.shape != self._shape:
                self._matrix = csr_matrix(self._shape)
            if not self._pending:
                return
            rows = np.concatenate([p[0] for p in self._pending])
            cols = np.concatenate([p[1] for p in self._pending])
            vals = np.concatenate([p[2] for p in self._pending])
            self._pending = []

        new = coo_matrix((vals, (rows, cols)), shape=self._shape).tocsr()
        self._matrix = (self._matrix + new).tocsr()
        logger.debug('make_compressed: %d triplets, %d stored non-zeros', vals.size, self._matrix.nnz)

    #--------------------------------------------------------------------------
    def give_matrix(self):
        """ Move the matrix out of the system, leaving an empty one. """
        self.make_compressed()
        mat, self._matrix = self._matrix, csr_matrix((0, 0))
        return mat

    def give_rhs(self):
        """ Move the right-hand side out of the system, which then has none. """
        rhs = self._rhs
        self._rhs = None
        return rhs

#==============================================================================
def push(acc, block, rows, row_map, cols=None, col_map=None, fixed=None):
    """
    Scatter one local element block into an accumulator.

    Parameters
    ----------
    acc : TripletAccumulator

    block : numpy.ndarray
        Local matrix of shape (len(rows), len(cols)), or local vector of shape
        (len(rows),) or (len(rows), nrhs).

    rows : numpy.ndarray of int
        Global indices of the local rows (all components, component-major).

    row_map : igaexpr.fem.dof_mapper.DofMapper
        Mapper of the row space.

    cols, col_map : optional
        Same for the columns of a matrix block.

    fixed : numpy.ndarray
        Values of the eliminated DOFs of the column space.

    Notes
    -----
    Free x free entries go to the matrix. Free x eliminated entries are moved
    to the first right-hand-side column as -entry*fixed value. Eliminated rows
    are dropped. Exact zeros are skipped.

    """
    block = np.asarray(block)
    rows  = np.asarray(rows)
    free_rows = row_map.is_free_index(rows)

    # Vector block
    if cols is None:
        if block.shape[0] != rows.size or block.ndim > 2:
            raise ValueError('Malformed local block: shape {} for {} rows'.format(block.shape, rows.size))
        if block.ndim == 1:
            block = block[:, None]
        i, j = np.nonzero((block != 0) & free_rows[:, None])
        if i.size:
            acc.add_rhs(rows[i], block[i, j], j)
        return

    # Matrix block
    cols = np.asarray(cols)
    if block.shape != (rows.size, cols.size):
        raise ValueError('Malformed local block: shape {}, expected {}'
                         .format(block.shape, (rows.size, cols.size)))

    nb = col_map.ncomp * col_map.boundary_size()
    if fixed is None or fixed.size != nb:
        raise ValueError('Inconsistent fixed DOFs: got {}, expected {} values'
                         .format(0 if fixed is None else fixed.size, nb))

    free_cols = col_map.is_free_index(cols)
    nonzero   = block != 0

    i, j = np.nonzero(nonzero & free_rows[:, None] & free_cols[None, :])
    if i.size:
        acc.add(rows[i], cols[j], block[i, j])

    i, j = np.nonzero(nonzero & free_rows[:, None] & ~free_cols[None, :])
    if i.size:
        b = col_map.global_to_bindex(cols[j])
        acc.add_rhs(rows[i], -block[i, j] * fixed[b])

#==============================================================================
class BlockView:
    """
    Read-only partition of a matrix into sub-blocks.

    Parameters
    ----------
    matrix : scipy.sparse matrix

    row_sizes, col_sizes : list of int
        Extents of the row and column partitions. Blocks reaching beyond the
        stored matrix are padded with zeros.

    """
    def __init__(self, matrix, row_sizes, col_sizes):

        self._matrix    = matrix.tocsr()
        self._row_sizes = [int(n) for n in row_sizes]
        self._col_sizes = [int(n) for n in col_sizes]
        self._row_off   = np.concatenate([[0], np.cumsum(self._row_sizes)]).astype(int)
        self._col_off   = np.concatenate([[0], np.cumsum(self._col_sizes)]).astype(int)

    @property
    def row_sizes(self):
        return tuple(self._row_sizes)

    @property
    def col_sizes(self):
        return tuple(self._col_sizes)

    @property
    def shape(self):
        """ Number of row and column blocks. """
        return len(self._row_sizes), len(self._col_sizes)

    def __getitem__(self, key):
        i, j = key
        r0, r1 = self._row_off[i], self._row_off[i+1]
        c0, c1 = self._col_off[j], self._col_off[j+1]
        nr, nc = self._matrix.shape

        sub = self._matrix[min(r0, nr):min(r1, nr), min(c0, nc):min(c1, nc)].tocsr()
        sub.resize((r1 - r0, c1 - c0))
        return sub

    def __repr__(self):
        return 'BlockView(rows={}, cols={})'.format(self._row_sizes, self._col_sizes)
