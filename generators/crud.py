# ============================================================================
# MODEL -> TYPESCRIPT CRUD GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - Supabase client functions per table
# PURPOSE: gen:crud output
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model -> TypeScript CRUD Generator

One module per creatable table, <out_dir>/<table>.ts, exporting:

    select<Name>Rows
    select<Name>RowById           (null when not found, PGRST116)
    select<Name>RowsWithFilters   (array values use .in())
    insert<Name>Row
    update<Name>Row
    delete<Name>Row

Modules import `supabase` from ../client and the row type from ../types.
"""

from pathlib import Path
from typing import List, Union

from core.models import DataModel, TableDef
from generators.base import GeneratedFile

# __TABLE__ is the table name, __NAME__ its capitalized form
_MODULE_TEMPLATE = """// Generated by supatool: CRUD functions for __TABLE__

import { supabase } from '../client';
import type { __TABLE__ } from '../types';

type FilterValue = string | number | boolean | null;
type Filters = Record<string, FilterValue | FilterValue[]>;

/** Fetch all rows */
export async function select__NAME__Rows(): Promise<__TABLE__[]> {
  const { data, error } = await supabase.from('__TABLE__').select('*');
  if (error) {
    console.error('Error fetching all __TABLE__:', error);
    throw new Error(`Failed to fetch __TABLE__: ${error.message}`);
  }
  return (data as __TABLE__[]) || [];
}

/** Fetch one row by ID */
export async function select__NAME__RowById({ id }: { id: string }): Promise<__TABLE__ | null> {
  if (!id) {
    throw new Error('ID is required');
  }
  const { data, error } = await supabase.from('__TABLE__').select('*').eq('id', id).single();
  if (error) {
    // PGRST116: no rows
    if (error.code === 'PGRST116') {
      return null;
    }
    console.error('Error fetching __TABLE__ by ID:', error);
    throw new Error(`Failed to fetch __TABLE__ with ID ${id}: ${error.message}`);
  }
  return data as __TABLE__ | null;
}

/** Fetch rows matching filters */
export async function select__NAME__RowsWithFilters({ filters }: { filters: Filters }): Promise<__TABLE__[]> {
  if (!filters || typeof filters !== 'object') return [];
  let query = supabase.from('__TABLE__').select('*');
  for (const [key, value] of Object.entries(filters)) {
    if (Array.isArray(value)) {
      query = query.in(key, value);
    } else {
      query = query.eq(key, value);
    }
  }
  const { data, error } = await query;
  if (error) {
    console.error('Error fetching __TABLE__ by filters:', error);
    throw new Error(`Failed to fetch __TABLE__: ${error.message}`);
  }
  return (data as unknown as __TABLE__[]) || [];
}

/** Create a row */
export async function insert__NAME__Row({ data }: { data: Omit<__TABLE__, 'id' | 'created_at' | 'updated_at'> }): Promise<__TABLE__> {
  if (!data) {
    throw new Error('Data is required for creation');
  }
  const { data: createdData, error } = await supabase
    .from('__TABLE__')
    .insert([data])
    .select()
    .single();
  if (error) {
    console.error('Error creating __TABLE__:', error);
    throw new Error(`Failed to create __TABLE__: ${error.message}`);
  }
  if (!createdData) {
    throw new Error('No data returned after creation');
  }
  return createdData as __TABLE__;
}

/** Update a row */
export async function update__NAME__Row({ id, data }: { id: string; data: Partial<Omit<__TABLE__, 'id' | 'created_at'>> }): Promise<__TABLE__> {
  if (!id) {
    throw new Error('ID is required for update');
  }
  if (!data || Object.keys(data).length === 0) {
    throw new Error('Update data is required');
  }
  const { data: updatedData, error } = await supabase
    .from('__TABLE__')
    .update(data)
    .eq('id', id)
    .select()
    .single();
  if (error) {
    if (error.code === 'PGRST116') {
      throw new Error(`__TABLE__ with ID ${id} not found`);
    }
    console.error('Error updating __TABLE__:', error);
    throw new Error(`Failed to update __TABLE__ with ID ${id}: ${error.message}`);
  }
  if (!updatedData) {
    throw new Error(`__TABLE__ with ID ${id} not found`);
  }
  return updatedData as __TABLE__;
}

/** Delete a row */
export async function delete__NAME__Row({ id }: { id: string }): Promise<boolean> {
  if (!id) {
    throw new Error('ID is required for deletion');
  }
  const { error } = await supabase
    .from('__TABLE__')
    .delete()
    .eq('id', id);
  if (error) {
    console.error('Error deleting __TABLE__:', error);
    throw new Error(`Failed to delete __TABLE__ with ID ${id}: ${error.message}`);
  }
  return true;
}
"""


def capitalize(name: str) -> str:
    """First character upper-cased, rest untouched (users -> Users)."""
    return name[:1].upper() + name[1:]


def crud_module(table: TableDef) -> str:
    return _MODULE_TEMPLATE.replace("__NAME__", capitalize(table.name)).replace("__TABLE__", table.name)


def generate_crud(model: DataModel, out_dir: Union[str, Path]) -> List[GeneratedFile]:
    """One CRUD module per creatable table."""
    directory = Path(out_dir)
    return [
        GeneratedFile(directory / f"{table.name}.ts", crud_module(table))
        for table in model.creatable_tables
    ]


__all__ = [
    "capitalize",
    "crud_module",
    "generate_crud",
]
