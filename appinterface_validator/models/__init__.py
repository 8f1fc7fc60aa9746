"""Source-mapped document trees and schema node variants."""
