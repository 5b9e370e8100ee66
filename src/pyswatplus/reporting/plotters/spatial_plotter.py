# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Spatial plotter.

Leaflet maps (folium) of HRU or subbasin attributes.
"""

from typing import List, Optional

import folium
import geopandas as gpd

from pyswatplus.reporting.core.base_plotter import BasePlotter

MAP_CRS = 'EPSG:4326'


class SpatialPlotter(BasePlotter):
    """Plotter for maps of spatial units."""

    def _to_map_crs(self, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        if gdf.crs is None:
            self.logger.warning(f"Layer has no CRS; assuming {MAP_CRS}")
            return gdf.set_crs(MAP_CRS)
        return gdf.to_crs(MAP_CRS)

    def plot_hru_map(
        self,
        gdf: gpd.GeoDataFrame,
        column: str,
        tooltip_columns: Optional[List[str]] = None,
        legend_name: Optional[str] = None,
        rivers: Optional[gpd.GeoDataFrame] = None,
    ) -> folium.Map:
        """
        Choropleth map of *column* over the features of *gdf*.

        Args:
            gdf: Spatial units with the value column (see join_spatial)
            column: Value column to colour the features by
            tooltip_columns: Columns shown when hovering a feature
                (default: the value column)
            legend_name: Colour bar caption (default: the column name)
            rivers: Optional river network drawn on top

        Returns:
            folium.Map
        """
        self._require_columns(gdf, [column], 'HRU map')
        layer = self._to_map_crs(gdf).reset_index(drop=True)
        layer['feature_id'] = layer.index.astype(str)

        minx, miny, maxx, maxy = layer.total_bounds
        fmap = folium.Map(
            location=[(miny + maxy) / 2, (minx + maxx) / 2],
            zoom_start=self.plot_config.MAP_ZOOM_START,
            tiles=self.plot_config.MAP_TILES,
        )
        fmap.fit_bounds([[miny, minx], [maxy, maxx]])

        folium.Choropleth(
            geo_data=layer[['feature_id', 'geometry']].to_json(),
            data=layer[['feature_id', column]],
            columns=['feature_id', column],
            key_on='feature.properties.feature_id',
            fill_color=self.plot_config.MAP_COLORMAP,
            fill_opacity=self.plot_config.MAP_FILL_OPACITY,
            line_opacity=self.plot_config.MAP_LINE_OPACITY,
            nan_fill_color='lightgray',
            legend_name=legend_name or column,
        ).add_to(fmap)

        fields = tooltip_columns or [column]
        self._require_columns(layer, fields, 'HRU map tooltip')
        folium.GeoJson(
            layer[fields + ['geometry']],
            style_function=lambda feature: {'fillOpacity': 0, 'weight': 0},
            tooltip=folium.GeoJsonTooltip(fields=fields),
        ).add_to(fmap)

        if rivers is not None and not rivers.empty:
            folium.GeoJson(
                self._to_map_crs(rivers),
                name='rivers',
                style_function=lambda feature: {'color': 'blue', 'weight': 2},
            ).add_to(fmap)
        return fmap
